"""
Author form validation.

Each rule is a (field, check, kind, message) entry evaluated on its own after
the field's sanitizer has run. Every rule is checked, so one field can report
several violations; errors come back in rule order:

- first_name: trimmed, HTML-escaped, then required, ASCII letters/digits only,
  at most NAME_MAX_LENGTH characters
- family_name: trimmed, then required, at most NAME_MAX_LENGTH characters
- date_of_birth / date_of_death: optional ISO-8601 dates, blanks become None
"""
import html
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ValidationError, model_validator
from pydantic_core import InitErrorDetails, PydanticCustomError

from app.core.errors import FieldError, FieldErrorKind
from app.models.author import Author

NAME_MAX_LENGTH = 100

_ALNUM = re.compile(r"[A-Za-z0-9]+")


def _text(value: object) -> str:
    return "" if value is None else str(value).strip()


def _parse_iso_date(value: object) -> date | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def _has_text(value: str) -> bool:
    return len(value) > 0


def _is_alphanumeric(value: str) -> bool:
    return _ALNUM.fullmatch(value) is not None


def _within_max_length(value: str) -> bool:
    return len(value) <= NAME_MAX_LENGTH


def _is_optional_iso_date(value: object) -> bool:
    try:
        _parse_iso_date(value)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class FieldRule:
    field: str
    check: Callable[[Any], bool]
    kind: FieldErrorKind
    message: str


# Sanitizers run before any rule sees the value
_SANITIZERS: dict[str, Callable[[object], object]] = {
    "first_name": lambda v: html.escape(_text(v)),
    "family_name": _text,
    "date_of_birth": lambda v: v,
    "date_of_death": lambda v: v,
}

AUTHOR_RULES: tuple[FieldRule, ...] = (
    FieldRule("first_name", _has_text, FieldErrorKind.REQUIRED, "First name is required."),
    FieldRule(
        "first_name",
        _is_alphanumeric,
        FieldErrorKind.FORMAT,
        "First name has non-alphanumeric characters.",
    ),
    FieldRule(
        "first_name",
        _within_max_length,
        FieldErrorKind.FORMAT,
        f"First name must be at most {NAME_MAX_LENGTH} characters.",
    ),
    FieldRule("family_name", _has_text, FieldErrorKind.REQUIRED, "Family name is required."),
    FieldRule(
        "family_name",
        _within_max_length,
        FieldErrorKind.FORMAT,
        f"Family name must be at most {NAME_MAX_LENGTH} characters.",
    ),
    FieldRule("date_of_birth", _is_optional_iso_date, FieldErrorKind.FORMAT, "Invalid date of birth"),
    FieldRule("date_of_death", _is_optional_iso_date, FieldErrorKind.FORMAT, "Invalid date of death"),
)


def check_author_rules(raw: Mapping[str, object]) -> tuple[dict[str, object], list[FieldError]]:
    """Sanitize the author fields of `raw` and return them with every failed rule."""
    values = {name: sanitize(raw.get(name)) for name, sanitize in _SANITIZERS.items()}
    errors = [
        FieldError(field=rule.field, kind=rule.kind, message=rule.message)
        for rule in AUTHOR_RULES
        if not rule.check(values[rule.field])
    ]
    return values, errors


# Validated, normalized author fields
class AuthorForm(BaseModel):
    first_name: str = ""
    family_name: str = ""
    date_of_birth: date | None = None
    date_of_death: date | None = None

    @model_validator(mode="before")
    @classmethod
    def apply_rules(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        values, errors = check_author_rules(data)
        if errors:
            line_errors = [
                InitErrorDetails(
                    type=PydanticCustomError(err.kind.value, err.message),
                    loc=(err.field,),
                    input=data.get(err.field),
                )
                for err in errors
            ]
            raise ValidationError.from_exception_data(cls.__name__, line_errors)
        values["date_of_birth"] = _parse_iso_date(values["date_of_birth"])
        values["date_of_death"] = _parse_iso_date(values["date_of_death"])
        return values


# Raw field values echoed back into the author form
class AuthorFormData(BaseModel):
    first_name: str = ""
    family_name: str = ""
    date_of_birth: str = ""
    date_of_death: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> "AuthorFormData":
        return cls(**{
            name: str(raw.get(name) or "")
            for name in cls.model_fields
        })

    @classmethod
    def from_author(cls, author: Author) -> "AuthorFormData":
        return cls(
            first_name=author.first_name,
            family_name=author.family_name,
            date_of_birth=author.date_of_birth_iso,
            date_of_death=author.date_of_death_iso,
        )


def validate_author_form(raw: Mapping[str, object]) -> tuple[AuthorForm | None, list[FieldError]]:
    """
    Run the author rules over raw form input.
    Returns the normalized form, or None plus every failed rule in rule order.
    """
    _, errors = check_author_rules(raw)
    if errors:
        return None, errors
    return AuthorForm.model_validate(dict(raw)), []
