from __future__ import annotations

from typing import List

import pytest

from fakes import make_item
from models import ScrapedItem


@pytest.fixture
def political_items() -> List[ScrapedItem]:
    return [
        make_item(
            "Parliament passes the Finance Bill after heated debate",
            "Members of parliament approved the finance bill, citing improvement in revenue and peace talks.",
        ),
        make_item(
            "Opposition leaders call for dialogue on cost of living",
            "Opposition figures urged dialogue and cooperation with government over rising taxes.",
            source="Citizen Digital",
        ),
        make_item(
            "Governors demand faster release of county funds",
            "County governors said delays in disbursement have caused a problem for devolution projects.",
            source="Capital FM",
        ),
    ]
