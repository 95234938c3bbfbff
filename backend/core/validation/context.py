"""Validation Context

One context is built per top-level validation call and threaded by
reference through every nested and element validation of that call. It is
the only channel through which custom predicates observe ambient state:

    async def unique_email(value, context):
        session = context.attributes["db"]
        ...

Identity (locale, correlation id, request info) is read-only; ``attributes``
is a mutable mapping for anything else the caller wants to hand over.

Predicates are unit-tested by building a context directly:

    ctx = ValidationContext.create(locale="fr", db=session)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping

import structlog
from starlette.requests import Request

from core.logging import generate_correlation_id
from .errors import ContextInUseError


@dataclass(frozen=True, slots=True)
class RequestInfo:
    """Snapshot of the originating request."""
    method: str = ""
    path: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    client_ip: str | None = None


class ValidationContext:
    """Per-invocation carrier of ambient state."""

    __slots__ = ("_locale", "_correlation_id", "_request", "attributes", "_active")

    def __init__(self, *, locale: str = "en", correlation_id: str | None = None,
                 request: RequestInfo | None = None, attributes: dict[str, Any] | None = None):
        self._locale = locale
        self._correlation_id = correlation_id or generate_correlation_id()
        self._request = request or RequestInfo()
        self.attributes: dict[str, Any] = dict(attributes or {})
        self._active = False

    @classmethod
    def create(cls, locale: str = "en", *, correlation_id: str | None = None, **attributes: Any) -> ValidationContext:
        """Build a context without an HTTP request (tests, background jobs)."""
        return cls(locale=locale, correlation_id=correlation_id, attributes=attributes)

    @property
    def locale(self) -> str: return self._locale

    @property
    def correlation_id(self) -> str: return self._correlation_id

    @property
    def request(self) -> RequestInfo: return self._request

    @property
    def in_use(self) -> bool: return self._active

    def get(self, key: str, default: Any = None) -> Any: return self.attributes.get(key, default)

    def acquire(self) -> None:
        """Mark the context as owned by a running validation."""
        if self._active:
            raise ContextInUseError(f"Validation context {self._correlation_id} is already in use")
        self._active = True

    def release(self) -> None: self._active = False

    def __repr__(self) -> str:
        return f"ValidationContext(locale={self._locale!r}, correlation_id={self._correlation_id!r})"


def parse_accept_language(header: str | None) -> str | None:
    """Pick the highest-weighted language tag of an Accept-Language header."""
    if not header: return None
    weighted: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        tag = tag.strip()
        if not tag or tag == "*": continue
        quality = 1.0
        if params.strip().startswith("q="):
            try: quality = float(params.strip()[2:])
            except ValueError: quality = 0.0
        if quality > 0: weighted.append((-quality, position, tag))
    return min(weighted)[2] if weighted else None


class ContextProvider:
    """Builds one ValidationContext per inbound request. Performs no I/O.

    The correlation id comes from the request header, else from the id the
    request middleware bound to the logging context.
    """

    def __init__(self, default_locale: str = "en"):
        self.default_locale = default_locale

    def get(self, request: Request, **attributes: Any) -> ValidationContext:
        headers = MappingProxyType({k.lower(): v for k, v in request.headers.items()})
        info = RequestInfo(method=request.method, path=request.url.path, headers=headers,
            client_ip=request.client.host if request.client else None)
        return ValidationContext(
            locale=parse_accept_language(headers.get("accept-language")) or self.default_locale,
            correlation_id=headers.get("x-correlation-id") or structlog.contextvars.get_contextvars().get("correlation_id"),
            request=info,
            attributes=attributes,
        )


@lru_cache
def get_context_provider() -> ContextProvider:
    """FastAPI dependency returning the process-wide provider."""
    from core.config import settings
    return ContextProvider(default_locale=settings.VALIDATION_DEFAULT_LOCALE)
