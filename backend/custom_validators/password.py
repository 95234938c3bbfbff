"""Password strength predicate."""
from core.validation import Custom, ValidationContext, predicate

MIN_LENGTH = 12


@predicate("strong_password")
def validate_strong_password(value: str | None, context: ValidationContext) -> bool:
    """At least 12 characters with an uppercase letter, a lowercase letter,
    a digit and a character that is neither letter nor digit.

    Absence is left to ``Required``.
    """
    if value is None:
        return True
    return (
        len(value) >= MIN_LENGTH
        and any(c.isupper() for c in value)
        and any(c.islower() for c in value)
        and any(c.isdigit() for c in value)
        and any(not c.isalnum() for c in value)
    )


StrongPassword = Custom("strong_password", message="password.strong_password")
