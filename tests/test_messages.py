from core.validation import MessageCatalog, MessageResolver


def test_builtin_catalogs_resolve_with_params(resolver):
    assert resolver.resolve("validation.required", "en", {"field": "email"}) == "email is required"
    assert resolver.resolve("validation.required", "fr", {"field": "email"}) == "email est obligatoire"


def test_region_falls_back_to_language_then_default(resolver):
    assert resolver.candidates("fr-CA") == ["fr-ca", "fr", "en"]
    assert resolver.resolve("validation.email", "fr_CA", {"field": "email"}) == "email doit être une adresse e-mail valide"
    assert resolver.resolve("validation.email", "de", {"field": "email"}) == "email must be a valid email address"


def test_application_catalog_is_merged(resolver):
    message = resolver.resolve("email.taken", "en", {"field": "email"})

    assert message == "email is already registered"


def test_unknown_key_falls_back_to_key(resolver):
    assert resolver.resolve("orders.too_many", "fr") == "orders.too_many"


def test_bad_template_never_raises():
    resolver = MessageResolver(MessageCatalog({"en": {"broken": "{field} needs {missing}", "odd": "{0}"}}))

    assert resolver.resolve("broken", "en", {"field": "x"}) == "{field} needs {missing}"
    assert resolver.resolve("odd", "en") == "{0}"


def test_nested_bundles_are_flattened():
    catalog = MessageCatalog({"EN": {"order": {"id": {"missing": "no id"}}}})

    assert catalog.lookup("en", "order.id.missing") == "no id"
    assert catalog.locales == frozenset({"en"})
