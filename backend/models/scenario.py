"""Scenario Request Payloads

Wire format is camelCase; violation paths use the wire names
(``customer.address.zipCode``). Every field is optional at the
deserialization layer so that presence is reported by ``Required`` in the
same report as every other rule.
"""
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.validation import (
    Accepted,
    Alpha,
    Custom,
    Email,
    Length,
    Pattern,
    Range,
    Required,
    SameAs,
    Size,
    Valid,
)
from custom_validators.password import StrongPassword

T = TypeVar("T")

NAME_CHARS = " -'"


class RequestModel(BaseModel):
    """Base for scenario payloads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# Registration form
# ============================================================================

class RegisterRequest(RequestModel):
    email: Annotated[str | None, Required(), Email(), Custom("unique_email", message="email.taken")] = None
    password: Annotated[str | None, Required(), StrongPassword] = None
    password_confirmation: Annotated[str | None, Required(), SameAs("password")] = None
    first_name: Annotated[str | None, Required(), Alpha(allow=NAME_CHARS), Length(min=2, max=50)] = None
    last_name: Annotated[str | None, Required(), Alpha(allow=NAME_CHARS), Length(min=2, max=50)] = None
    age: Annotated[int | None, Required(), Range(min=18, max=120)] = None
    phone_number: Annotated[str | None, Pattern(r"\+?[0-9]{10,15}")] = None
    terms_accepted: Annotated[bool | None, Required(), Accepted()] = None


# ============================================================================
# Two-level nesting
# ============================================================================

class Address(RequestModel):
    street: Annotated[str | None, Required(), Length(min=3, max=200)] = None
    city: Annotated[str | None, Required(), Alpha(allow=NAME_CHARS), Length(min=2, max=100)] = None
    zip_code: Annotated[str | None, Required(), Pattern(r"[A-Za-z0-9 -]{3,10}")] = None


class Customer(RequestModel):
    name: Annotated[str | None, Required(), Length(min=2, max=100)] = None
    email: Annotated[str | None, Required(), Email()] = None
    address: Annotated[Address | None, Required(), Valid()] = None


class Order(RequestModel):
    id: Annotated[str | None, Required(), Length(min=1, max=50)] = None


class TwoLevelsRequest(RequestModel):
    order: Annotated[Order | None, Required(), Valid()] = None
    customer: Annotated[Customer | None, Required(), Valid()] = None


# ============================================================================
# Product collection
# ============================================================================

class Product(RequestModel):
    name: Annotated[str | None, Required(), Length(min=3, max=100)] = None
    description: Annotated[str | None, Required(), Length(min=10, max=500)] = None
    price: Annotated[float | None, Required(), Range(min=0.01, max=2000)] = None
    quantity: Annotated[int | None, Required(), Range(min=0)] = None
    category: Annotated[str | None, Required(), Length(min=3, max=50)] = None
    sku: Annotated[str | None, Required()] = None


class ProductArrayRequest(RequestModel):
    products: Annotated[list[Product] | None, Required(), Size(min=1), Valid(each=True)] = None


# ============================================================================
# Responses
# ============================================================================

class DataResponse(BaseModel, Generic[T]):
    data: T
    message: str


SCENARIO_PAYLOADS = (RegisterRequest, TwoLevelsRequest, ProductArrayRequest)
