import pytest

from core.validation import ValidationContext
from models.user import User
from custom_validators.accounts import unique_email
from custom_validators.password import StrongPassword, validate_strong_password


@pytest.mark.parametrize(
    "password,expected",
    [
        ("short1!", False),             # too short
        ("alllowercase123!", False),    # no uppercase
        ("ALLUPPERCASE123!", False),    # no lowercase
        ("NoDigitsHere!!!!", False),    # no digit
        ("NoSpecialChar123", False),    # no special character
        ("Valid$Pass1234", True),
        (None, True),                   # presence is handled by Required
    ],
)
def test_strong_password(password, expected):
    assert validate_strong_password(password, ValidationContext.create()) is expected


def test_strong_password_rule_reference():
    assert StrongPassword.name == "strong_password"
    assert StrongPassword.message_key == "password.strong_password"


@pytest.mark.asyncio
async def test_unique_email_against_database(session):
    session.add(User(email="Jane.Doe@example.com", first_name="Jane", last_name="Doe", age=34))
    await session.commit()
    context = ValidationContext.create(db=session)

    assert await unique_email("jane.doe@EXAMPLE.com", context) is False
    assert await unique_email("john.doe@example.com", context) is True
    assert await unique_email(None, context) is True
