import pytest

from core.validation import (
    Accepted,
    Alpha,
    Custom,
    Email,
    Length,
    Pattern,
    Range,
    Required,
    RuleKind,
    SameAs,
    Size,
    Valid,
)


class _Form:
    def __init__(self, password, confirmation):
        self.password, self.confirmation = password, confirmation


@pytest.mark.parametrize(
    "rule,value,expected",
    [
        (Required(), None, False),
        (Required(), "", True),
        (Required(allow_blank=False), "   ", False),
        (Length(min=3, max=5), "abc", True),
        (Length(min=3, max=5), "ab", False),
        (Length(min=3, max=5), "abcdef", False),
        (Length(max=2), 12, False),
        (Pattern(r"\+?[0-9]{10,15}"), "+33612345678", True),
        (Pattern(r"\+?[0-9]{10,15}"), "0612-345-678", False),
        (Email(), "jane.doe@example.com", True),
        (Email(), "jane.doe@", False),
        (Alpha(), "Zoé", True),
        (Alpha(), "Jean-Luc", False),
        (Alpha(allow=" -'"), "Jean-Luc O'Neil", True),
        (Alpha(), "", False),
        (Range(min=18, max=120), 18, True),
        (Range(min=18, max=120), 121, False),
        (Range(min=0.01), 0.0, False),
        (Range(min=0), True, False),
        (Range(min=0), "5", False),
        (Accepted(), True, True),
        (Accepted(), False, False),
        (Accepted(), "true", False),
        (Size(min=1), [1], True),
        (Size(min=1), [], False),
        (Size(max=1), "ab", False),
    ],
)
def test_builtin_rule_evaluation(rule, value, expected):
    assert rule.evaluate(value) is expected


def test_same_as_reads_sibling_value():
    rule = SameAs("password")

    assert rule.evaluate("Valid$Pass1234", _Form("Valid$Pass1234", None)) is True
    assert rule.evaluate("different", _Form("Valid$Pass1234", None)) is False


def test_only_required_checks_absence():
    assert Required().checks_absence is True
    assert not any(r.checks_absence for r in (Length(min=1), Email(), Accepted(), Valid(), Custom("x")))


@pytest.mark.parametrize(
    "rule,key",
    [
        (Length(min=2, max=50), "validation.length"),
        (Length(min=2), "validation.min_length"),
        (Length(max=50), "validation.max_length"),
        (Range(min=0), "validation.min"),
        (Range(max=10), "validation.max"),
        (Size(min=1), "validation.min_size"),
        (Email(), "validation.email"),
        (Custom("strong_password", message="password.strong_password"), "password.strong_password"),
    ],
)
def test_message_keys(rule, key):
    assert rule.message_key == key


def test_valid_kind_depends_on_each():
    assert Valid().kind is RuleKind.VALID
    assert Valid(each=True).kind is RuleKind.EACH


def test_rules_are_immutable_values():
    assert Length(min=1, max=2) == Length(min=1, max=2)
    assert Pattern("a+") == Pattern("a+")
    with pytest.raises(AttributeError):
        Length(min=1).min = 2
