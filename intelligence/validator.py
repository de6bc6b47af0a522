"""
Response Validator
Recover a JSON object from free model text and check it against an OutputSchema
"""
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from utils.exceptions import ResponseValidationError

from .schema import FieldKind, FieldSpec, OutputSchema


logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```[a-zA-Z]*\s*(.*?)\s*```", re.DOTALL)


@dataclass(frozen=True)
class Valid:
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Invalid:
    reason: str


ValidationResult = Union[Valid, Invalid]


def strip_fences(text: str) -> str:
    """Body of the first markdown code fence, or the text itself."""
    match = FENCE_PATTERN.search(text)
    return match.group(1) if match else text


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the brace closing the one at `start`, ignoring braces inside strings."""
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return idx
    return None


def extract_json_object(raw_text: str) -> Optional[Dict[str, Any]]:
    """
    First JSON object embedded in model output.

    Handles code fences and surrounding prose. Returns None when no
    balanced, parseable object exists.
    """
    text = strip_fences(str(raw_text or "")).strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except ValueError:
        pass

    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is None:
            start = text.find("{", start + 1)
            continue
        try:
            parsed = json.loads(text[start:end + 1])
            if isinstance(parsed, dict):
                return parsed
        except ValueError:
            pass
        start = text.find("{", start + 1)
    return None


class ResponseValidator:
    """
    Structural validation only; semantics are never checked.

    Numbers are clamped into range, enums are matched case-insensitively,
    lists are filtered and truncated, and optional fields get defaults.
    """

    def validate(self, raw_text: str, schema: OutputSchema) -> ValidationResult:
        data = extract_json_object(raw_text)
        if data is None:
            return Invalid("no JSON object found in model output")

        try:
            cleaned = self._check_fields(data, schema.fields)
        except ResponseValidationError as e:
            logger.debug(f"{schema.name}: {e}")
            return Invalid(e.message)

        return Valid(cleaned)

    def _check_fields(self, data: Dict[str, Any], specs: Tuple[FieldSpec, ...]) -> Dict[str, Any]:
        cleaned: Dict[str, Any] = {}
        for spec in specs:
            if data.get(spec.name) is None:
                if spec.required:
                    raise ResponseValidationError(f"missing required field '{spec.name}'")
                default = spec.default
                cleaned[spec.name] = list(default) if isinstance(default, list) else default
                continue
            cleaned[spec.name] = self._check_value(spec, data[spec.name])
        return cleaned

    def _check_value(self, spec: FieldSpec, value: Any) -> Any:
        kind = spec.kind

        if kind in (FieldKind.NUMBER, FieldKind.INTEGER):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ResponseValidationError(f"'{spec.name}' is not a number")
            if isinstance(value, float) and not math.isfinite(value):
                raise ResponseValidationError(f"'{spec.name}' is not finite")
            number = float(self._clamp(float(value), spec.minimum, spec.maximum))
            return int(round(number)) if kind == FieldKind.INTEGER else number

        if kind == FieldKind.STRING:
            if not isinstance(value, str) or not value.strip():
                raise ResponseValidationError(f"'{spec.name}' is not a non-empty string")
            return value.strip()

        if kind == FieldKind.ENUM:
            if isinstance(value, str):
                wanted = value.strip().lower()
                for choice in spec.choices:
                    if choice.lower() == wanted:
                        return choice
            raise ResponseValidationError(f"'{spec.name}' must be one of {list(spec.choices)}, got {value!r}")

        if kind == FieldKind.STRING_LIST:
            if not isinstance(value, list):
                raise ResponseValidationError(f"'{spec.name}' is not a list")
            strings = [v.strip() for v in value if isinstance(v, str) and v.strip()]
            return strings[:spec.max_items] if spec.max_items else strings

        if kind == FieldKind.OBJECT_LIST:
            if not isinstance(value, list):
                raise ResponseValidationError(f"'{spec.name}' is not a list")
            kept: List[Dict[str, Any]] = []
            for item in value:
                if not isinstance(item, dict):
                    continue
                try:
                    kept.append(self._check_fields(item, spec.item_fields))
                except ResponseValidationError:
                    continue
            if not kept:
                raise ResponseValidationError(f"'{spec.name}' has no valid entries")
            return kept[:spec.max_items] if spec.max_items else kept

        raise ResponseValidationError(f"unsupported field kind {kind}")

    @staticmethod
    def _clamp(value: float, minimum: Optional[float], maximum: Optional[float]) -> float:
        if minimum is not None:
            value = max(minimum, value)
        if maximum is not None:
            value = min(maximum, value)
        return value


def validate(raw_text: str, schema: OutputSchema) -> ValidationResult:
    return ResponseValidator().validate(raw_text, schema)
