import pytest

from core.validation import ConfigurationError, ValidatorRegistry, get_registry


def _always(value, context):
    return True


def test_register_and_resolve(registry):
    registry.register("always", _always)

    assert registry.resolve("always") is _always
    assert "always" in registry
    assert len(registry) == 1


def test_decorator_registers_and_returns_function(registry):
    @registry.predicate("even")
    def even(value, context):
        return value % 2 == 0

    assert registry.resolve("even") is even
    assert even(4, None) is True


def test_resolve_unknown_lists_available_names(registry):
    registry.register("always", _always)

    with pytest.raises(ConfigurationError, match="Available: always"):
        registry.resolve("missing")


def test_duplicate_registration_is_rejected(registry):
    registry.register("always", _always)
    registry.register("always", _always)  # same callable is a no-op

    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register("always", lambda value, context: False)

    replacement = registry.register("always", lambda value, context: False, replace=True)
    assert registry.resolve("always") is replacement


def test_non_callable_is_rejected(registry):
    with pytest.raises(ConfigurationError, match="not callable"):
        registry.register("broken", "nope")


def test_frozen_registry_rejects_registration(registry):
    registry.freeze()

    assert registry.frozen
    with pytest.raises(ConfigurationError, match="frozen"):
        registry.register("late", _always)


def test_application_predicates_are_registered_on_import():
    import custom_validators  # noqa: F401

    assert {"strong_password", "unique_email"} <= set(get_registry().names())
