"""
Translate pydantic validation failures into field-addressable errors.

pydantic reports every failing field at once; callers of the engine want one
readable message whose prefix names the input path ("pensionInputs.growthRate
must be greater than -1") plus the full list for forms that highlight several
fields at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError

_TYPE_MESSAGES: Dict[str, str] = {
    "missing": "is required",
    "int_type": "must be an integer",
    "int_from_float": "must be an integer",
    "int_parsing": "must be an integer",
    "float_type": "must be a finite number",
    "float_parsing": "must be a finite number",
    "finite_number": "must be a finite number",
    "bool_type": "must be a boolean",
    "string_type": "must be a string",
    "date_type": "must be a YYYY-MM-DD string",
    "model_type": "must be an object",
    "dict_type": "must be an object",
}


@dataclass
class ValidationResult:
    """Collects (field path, problem) pairs for one input record."""

    root: str
    problems: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.problems) == 0

    @property
    def messages(self) -> List[str]:
        return [f"{path} {problem}" for path, problem in self.problems]

    def add(self, loc: Tuple[Any, ...], problem: str) -> None:
        path = ".".join([self.root, *[str(part) for part in loc]])
        self.problems.append((path, problem))

    def raise_if_invalid(self) -> None:
        if self.is_valid:
            return
        path, _ = self.problems[0]
        raise ValidationError(self.messages[0], field=path, errors=self.messages)


def describe_error(err: Dict[str, Any]) -> str:
    """Human wording for one pydantic error dict."""
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    if kind == "greater_than":
        return f"must be greater than {_number_text(ctx.get('gt'))}"
    if kind == "greater_than_equal":
        return f"must be greater than or equal to {_number_text(ctx.get('ge'))}"
    if kind == "less_than_equal":
        return f"must be less than or equal to {_number_text(ctx.get('le'))}"
    if kind == "literal_error":
        return f"must be {ctx.get('expected', 'one of the allowed values')}"
    if kind in _TYPE_MESSAGES:
        return _TYPE_MESSAGES[kind]
    return str(err.get("msg", "is invalid"))


def collect_errors(exc: PydanticValidationError, root: str) -> ValidationResult:
    result = ValidationResult(root=root)
    for err in exc.errors():
        result.add(tuple(err.get("loc", ())), describe_error(err))
    return result


def _number_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
