from dataclasses import dataclass
from typing import Annotated, ClassVar

import pytest
from pydantic import BaseModel

from core.validation import (
    ConfigurationError,
    Custom,
    Length,
    Required,
    SameAs,
    Valid,
    declare,
    resolve_declarations,
    structural_targets,
)
from models.scenario import Address, Customer, Product, RegisterRequest, TwoLevelsRequest


@dataclass
class Line:
    sku: Annotated[str | None, Required()] = None
    note: str | None = None
    kind: ClassVar[str] = "line"


class LegacyOrder:
    reference: str | None
    total: float | None


def test_pydantic_declarations_follow_field_order_and_aliases():
    declarations = resolve_declarations(RegisterRequest)

    assert [d.path for d in declarations] == [
        "email", "password", "passwordConfirmation", "firstName",
        "lastName", "age", "phoneNumber", "termsAccepted",
    ]
    assert declarations[2].name == "password_confirmation"
    assert declarations[2].rules == (Required(), SameAs("password"))


def test_custom_references_are_exposed():
    email = resolve_declarations(RegisterRequest)[0]

    assert [r.name for r in email.custom_rules] == ["unique_email"]


def test_dataclass_fields_without_rules_are_omitted():
    declarations = resolve_declarations(Line)

    assert [d.name for d in declarations] == ["sku"]


def test_declaration_table_supplies_rules():
    declare(LegacyOrder, "reference", Required(), Length(max=32))

    (reference,) = resolve_declarations(LegacyOrder)

    assert reference.name == "reference"
    assert reference.rules == (Required(), Length(max=32))


def test_declaration_table_rejects_unknown_field():
    class Ticket:
        code: str | None

    declare(Ticket, "missing", Required())

    with pytest.raises(ConfigurationError, match="missing"):
        resolve_declarations(Ticket)


def test_declare_rejects_non_rules():
    with pytest.raises(ConfigurationError):
        declare(LegacyOrder, "total", "required")


def test_same_as_must_reference_a_field():
    class Broken(BaseModel):
        confirmation: Annotated[str | None, SameAs("secret")] = None

    with pytest.raises(ConfigurationError, match="secret"):
        resolve_declarations(Broken)


def test_structural_declarations_expose_nested_types():
    customer = next(d for d in resolve_declarations(TwoLevelsRequest) if d.name == "customer")

    assert customer.is_structural
    assert structural_targets(customer.annotation) == (Customer,)
    assert structural_targets(resolve_declarations(Customer)[2].annotation) == (Address,)


@pytest.mark.parametrize(
    "annotation,expected",
    [
        (list[Product] | None, (Product,)),
        (dict[str, Product], (Product,)),
        (tuple[Product, ...], (Product,)),
        (Annotated[Address | None, Valid()], (Address,)),
        (str | None, ()),
        (list[int], ()),
    ],
)
def test_structural_targets(annotation, expected):
    assert structural_targets(annotation) == expected


def test_resolution_is_cached():
    assert resolve_declarations(Product) is resolve_declarations(Product)


def test_custom_rule_in_dataclass():
    @dataclass
    class Signup:
        password: Annotated[str | None, Custom("strong_password")] = None

    (password,) = resolve_declarations(Signup)

    assert password.custom_rules == (Custom("strong_password"),)
