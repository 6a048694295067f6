"""
Request context for route handlers.

A RequestContext is composed from the Starlette request plus the auth
settings injected by the auth middleware. It is built per request and
never mutated.
"""

import re
import sys
from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import Request

from apiboot.core.config import AuthConfig
from apiboot.shared.binding import Binder, Validator
from apiboot.shared.errors.handlers import request_locale

T = TypeVar("T")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


class ValidatorNotRegisteredError(RuntimeError):
    """Raised when validation is requested but the capability is off."""

    def __init__(self) -> None:
        super().__init__("validator not registered")


@dataclass(frozen=True)
class RequestContext:
    """Per-request view handed to handlers via ``Depends``.

    Attributes:
        request: The underlying Starlette request.
        auth: Auth settings, or None when the server has none.
    """

    request: Request
    auth: AuthConfig | None = None

    @property
    def request_id(self) -> str | None:
        return getattr(self.request.state, "request_id", None)

    def locale(self) -> str:
        return request_locale(self.request)

    def validate(self, obj: Any) -> None:
        validate(self.request, obj)

    async def bind(self, model: type[T]) -> T:
        return await bind(self.request, model)

    def int_param(self, name: str) -> int:
        return int_param(self.request, name)

    def int64_param(self, name: str) -> int:
        return int64_param(self.request, name)


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency returning the context of the current request."""
    return RequestContext(request=request, auth=getattr(request.state, "auth", None))


def validate(request: Request, obj: Any) -> None:
    """Validate ``obj`` with the app's validator.

    Raises:
        ValidatorNotRegisteredError: If the validation capability is off.
        ValidationFailed: If ``obj`` breaks its declared rules.
    """
    validator: Validator | None = getattr(request.app.state, "validator", None)
    if validator is None:
        raise ValidatorNotRegisteredError()
    validator.validate(obj)


async def bind(request: Request, model: type[T]) -> T:
    """Bind path, query and body data of ``request`` into ``model``."""
    binder: Binder | None = getattr(request.app.state, "binder", None)
    if binder is None:
        binder = Binder(getattr(request.app.state, "validator", None))
    return await binder.bind(request, model)


def int64_param(request: Request, name: str) -> int:
    """Parse path parameter ``name`` as a signed 64-bit integer.

    Raises:
        ValueError: If the value is missing, not base-10, or out of range.
    """
    return _parse_int(request, name, INT64_MIN, INT64_MAX)


def int_param(request: Request, name: str) -> int:
    """Parse path parameter ``name`` as a platform-sized integer."""
    return _parse_int(request, name, -sys.maxsize - 1, sys.maxsize)


def _parse_int(request: Request, name: str, lower: int, upper: int) -> int:
    raw = str(request.path_params.get(name, ""))
    if not _INTEGER.fullmatch(raw):
        raise ValueError(f'parsing path parameter "{name}": invalid syntax {raw!r}')
    value = int(raw, 10)
    if not lower <= value <= upper:
        raise ValueError(f'parsing path parameter "{name}": value out of range {raw!r}')
    return value
