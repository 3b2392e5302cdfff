# invoicedesk/validation.py

"""
Turn submitted form values into typed records.

:func:`validate_form` never raises for bad input. It returns :class:`Ok` with
a validated pydantic model, or :class:`Err` with a field error map keyed by
the submitted field names. All failing fields are reported together.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

ModelT = TypeVar("ModelT", bound=BaseModel)

FieldErrors = Dict[str, List[str]]

INVALID_NUMBER = "Please enter a valid number."


@dataclass(frozen=True)
class Ok(Generic[ModelT]):
    value: ModelT


@dataclass(frozen=True)
class Err:
    errors: FieldErrors


ValidationResult = Union[Ok[ModelT], Err]


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def custom_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("form_field", message)


def require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise custom_error(message)
    return value.strip()


def parse_decimal(value: Any) -> Decimal:
    """Parse decimal text (or a number) into a finite ``Decimal``."""
    if isinstance(value, bool):
        raise custom_error(INVALID_NUMBER)
    if isinstance(value, (int, float, Decimal)):
        value = str(value)
    if not isinstance(value, str):
        raise custom_error(INVALID_NUMBER)
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        raise custom_error(INVALID_NUMBER)
    if not number.is_finite():
        raise custom_error(INVALID_NUMBER)
    return number


def validate_form(
    model: Type[ModelT],
    raw: Mapping[str, Any],
    fields: Iterable[str],
    required: Iterable[str],
    messages: Mapping[str, str],
    context: Optional[Dict[str, Any]] = None,
) -> ValidationResult:
    """
    Validate ``raw`` against ``model``.

    ``fields`` are the form field names read from ``raw``; blank values are
    treated as absent. Any name in ``required`` that is absent gets its entry
    from ``messages``. Present values go through the model's validators.
    """
    data = {}
    for name in fields:
        value = raw.get(name)
        if is_present(value):
            data[name] = value

    errors: FieldErrors = {}
    for name in required:
        if name not in data:
            errors[name] = [messages[name]]

    value = None
    try:
        value = model.model_validate(data, context=context or {})
    except ValidationError as exc:
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__all__"
            errors.setdefault(field, [])
            if error["msg"] not in errors[field]:
                errors[field].append(error["msg"])

    if errors:
        return Err(errors)
    return Ok(value)
