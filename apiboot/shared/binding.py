"""
Request binding and validation capabilities.

The validator and the binders are attached to the app's capability
slots by the installer. pydantic is the rule engine; its failures are
always surfaced as ValidationFailed.
"""

import dataclasses
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.requests import Request

from apiboot.shared.errors.types import FieldFailure, ValidationFailed

T = TypeVar("T")

_JSON_TYPES = ("application/json", "+json")
_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class Validator:
    """Runs pydantic validation and reports field-level failures."""

    def validate(self, obj: Any) -> None:
        """Re-validate an already built model or dataclass instance.

        Raises:
            ValidationFailed: If any field breaks its declared rules.
            TypeError: If ``obj`` is neither a pydantic model nor a dataclass.
        """
        if isinstance(obj, BaseModel):
            self.validate_as(type(obj), obj.model_dump(by_alias=True))
        elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            self.validate_as(type(obj), dataclasses.asdict(obj))
        else:
            raise TypeError(f"cannot validate object of type {type(obj).__name__}")

    def validate_as(self, model: type[T], data: Any) -> T:
        """Validate raw data into ``model``."""
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as exc:
            raise ValidationFailed.from_pydantic(exc.errors()) from exc


class Binder:
    """Binds path parameters, query parameters and the body into a model.

    Later sources win: path, then query, then body.
    """

    def __init__(self, validator: Validator | None = None) -> None:
        self.validator = validator or Validator()

    async def bind(self, request: Request, model: type[T]) -> T:
        data: dict[str, Any] = {}
        data.update(request.path_params)
        data.update(request.query_params)
        data.update(await self._body(request))
        return self.validator.validate_as(model, self.prepare(data))

    def prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    async def _body(self, request: Request) -> dict[str, Any]:
        content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        if not content_type:
            return {}
        if content_type.endswith(_JSON_TYPES):
            raw = await request.body()
            if not raw:
                return {}
            try:
                payload = await request.json()
            except ValueError:
                raise ValidationFailed(
                    [FieldFailure(field="body", rule="json_invalid")]
                ) from None
            if not isinstance(payload, dict):
                raise ValidationFailed(
                    [FieldFailure(field="body", rule="model_attributes_type", value=payload)]
                )
            return payload
        if content_type in _FORM_TYPES:
            form = await request.form()
            return dict(form)
        return {}


class DefaultValueBinder(Binder):
    """Binder that lets declared field defaults fill in blank values.

    Empty strings and nulls are treated as absent, so a field declared
    ``page: int = 1`` bound from ``?page=`` ends up as ``1``.
    """

    def prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in data.items() if value not in ("", None)}
