"""
Output Schema
Field level contract shared by the prompt builder and the response validator
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class FieldKind(str, Enum):
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    ENUM = "enum"
    STRING_LIST = "string_list"
    OBJECT_LIST = "object_list"


@dataclass(frozen=True)
class FieldSpec:
    """
    One top level (or nested) JSON field.

    Attributes:
        name: JSON key
        kind: value type
        required: absence makes the answer invalid
        minimum / maximum: clamp range for numeric kinds
        choices: allowed values for ENUM (matched case-insensitively)
        max_items: truncation bound for lists
        item_fields: fields of each object in an OBJECT_LIST
        default: value used when an optional field is missing
        description: free text shown to the model
    """
    name: str
    kind: FieldKind
    required: bool = True
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    choices: Tuple[str, ...] = ()
    max_items: Optional[int] = None
    item_fields: Tuple["FieldSpec", ...] = ()
    default: Any = None
    description: str = ""

    def type_label(self) -> str:
        if self.kind == FieldKind.ENUM:
            return " | ".join(f'"{c}"' for c in self.choices)
        if self.kind in (FieldKind.NUMBER, FieldKind.INTEGER):
            label = self.kind.value
            if self.minimum is not None and self.maximum is not None:
                label += f" in [{_fmt(self.minimum)}, {_fmt(self.maximum)}]"
            return label
        if self.kind == FieldKind.STRING_LIST:
            label = "array of strings"
            if self.max_items:
                label += f" (at most {self.max_items})"
            return label
        if self.kind == FieldKind.OBJECT_LIST:
            inner = ", ".join(f'"{f.name}": {f.type_label()}' for f in self.item_fields)
            label = f"array of {{{inner}}}"
            if self.max_items:
                label += f" (at most {self.max_items})"
            return label
        return "non-empty string"


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class OutputSchema:
    """Named list of fields a task expects back"""
    name: str
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def describe(self) -> str:
        """Literal contract text for the prompt."""
        lines = ["{"]
        for spec in self.fields:
            line = f'  "{spec.name}": {spec.type_label()}'
            notes = []
            if not spec.required:
                notes.append("optional")
            if spec.description:
                notes.append(spec.description)
            if notes:
                line += f"  // {'; '.join(notes)}"
            lines.append(line)
        lines.append("}")
        return "\n".join(lines)
