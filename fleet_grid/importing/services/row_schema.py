"""Row schemas: turn a mapped row into validated data or field errors."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError

from ...exceptions import RowValidationError
from ...utils import coerce_bool
from ..constants import NON_FIELD_PATH

FieldErrors = dict[str, list[str]]


@runtime_checkable
class RowSchema(Protocol):
    """
    Validates one mapped row.

    ``validate`` returns ``(cleaned_data, None)`` on success or
    ``(None, errors)`` where ``errors`` maps a field path to its messages.
    """

    def validate(self, data: dict[str, Any]) -> tuple[Optional[dict[str, Any]], Optional[FieldErrors]]:
        ...


def _path(field_name: Optional[str]) -> str:
    if not field_name or field_name == NON_FIELD_ERRORS:
        return NON_FIELD_PATH
    return field_name


def validation_error_to_field_errors(error: ValidationError) -> FieldErrors:
    """Flatten a Django ``ValidationError`` into ``{path: [messages]}``."""
    if hasattr(error, "error_dict"):
        return {_path(name): list(messages) for name, messages in error.message_dict.items()}
    return {NON_FIELD_PATH: list(error.messages)}


class FormRowSchema:
    """Validates rows with a ``django.forms.Form`` subclass."""

    def __init__(self, form_class: type[forms.BaseForm]) -> None:
        self.form_class = form_class

    def validate(self, data: dict[str, Any]) -> tuple[Optional[dict[str, Any]], Optional[FieldErrors]]:
        form = self.form_class(data=data)
        if form.is_valid():
            return dict(form.cleaned_data), None
        errors: FieldErrors = {}
        for name, messages in form.errors.items():
            errors.setdefault(_path(name), []).extend(str(message) for message in messages)
        return None, errors


class CallableRowSchema:
    """
    Validates rows with a plain function.

    The function returns the cleaned mapping, or raises ``ValidationError`` /
    ``RowValidationError`` to reject the row.
    """

    def __init__(self, func: Callable[[dict[str, Any]], Optional[dict[str, Any]]]) -> None:
        self.func = func

    def validate(self, data: dict[str, Any]) -> tuple[Optional[dict[str, Any]], Optional[FieldErrors]]:
        try:
            cleaned = self.func(dict(data))
        except ValidationError as exc:
            return None, validation_error_to_field_errors(exc)
        except RowValidationError as exc:
            return None, {_path(exc.field_path): [exc.message]}
        return (dict(data) if cleaned is None else dict(cleaned)), None


def as_row_schema(schema: Any) -> RowSchema:
    """Accept a schema object, a form class or a callable."""
    if isinstance(schema, type) and issubclass(schema, forms.BaseForm):
        return FormRowSchema(schema)
    if isinstance(schema, RowSchema):
        return schema
    if callable(schema):
        return CallableRowSchema(schema)
    raise TypeError(f"Unsupported row schema: {schema!r}")


class SpreadsheetBooleanField(forms.Field):
    """Boolean form field that understands spreadsheet cells ("yes", 1, TRUE)."""

    default_error_messages = {"invalid": "Enter a yes/no value."}

    def to_python(self, value: Any) -> Optional[bool]:
        if value in self.empty_values:
            return None
        sentinel = object()
        coerced = coerce_bool(value, default=sentinel)
        if coerced is sentinel:
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        return coerced

    def validate(self, value: Any) -> None:
        if value is None and self.required:
            raise ValidationError(self.error_messages["required"], code="required")
