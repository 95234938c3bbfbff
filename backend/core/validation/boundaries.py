"""Validation at the API Boundary

Route handlers receive the deserialized body from FastAPI and hand it to a
``ValidationBoundary``, which builds the per-request context and runs the
engine. Violations surface as ``ValidationError`` and are rendered by the
error handlers as a 400 response.

Usage:
    @router.post("/products-array")
    async def products(body: ProductArrayRequest,
                       boundary: ValidationBoundary = Depends(validation_boundary)):
        await boundary.validate(body)
        ...

Extra keyword arguments become context attributes visible to predicates:

    await boundary.validate(body, db=db)
"""
from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from core.errors import misconfigured, raise_error
from .context import ContextProvider, ValidationContext, get_context_provider
from .engine import ValidationEngine
from .report import ViolationReport


def get_engine(request: Request) -> ValidationEngine:
    """FastAPI dependency returning the engine built at startup."""
    engine = getattr(request.app.state, "validation_engine", None)
    if engine is None:
        raise_error(misconfigured("Validation engine is not initialized", origin="validation",
            path=request.url.path).error)
    return engine


class ValidationBoundary:
    """Validates payloads entering through one request."""

    __slots__ = ("request", "engine", "provider")

    def __init__(self, request: Request, engine: ValidationEngine, provider: ContextProvider):
        self.request, self.engine, self.provider = request, engine, provider

    def context(self, **attributes: Any) -> ValidationContext:
        return self.provider.get(self.request, **attributes)

    async def check(self, payload: Any, **attributes: Any) -> ViolationReport:
        """Validate and return the report without raising."""
        return await self.engine.validate(payload, self.context(**attributes))

    async def validate(self, payload: Any, **attributes: Any) -> None:
        """Validate and raise ValidationError when the payload has violations."""
        (await self.check(payload, **attributes)).raise_if_invalid()


def validation_boundary(
    request: Request,
    engine: ValidationEngine = Depends(get_engine),
    provider: ContextProvider = Depends(get_context_provider),
) -> ValidationBoundary:
    return ValidationBoundary(request, engine, provider)
