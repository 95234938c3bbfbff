import pytest
from starlette.requests import Request

from core.validation import (
    ContextInUseError,
    ContextProvider,
    ValidationContext,
    parse_accept_language,
)


def _request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/scenario/register",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": ("10.0.0.7", 51000),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("fr-CA", "fr-CA"),
        ("fr-CA,fr;q=0.9,en;q=0.8", "fr-CA"),
        ("en;q=0.5, de;q=0.9", "de"),
        ("*", None),
        ("es;q=0, it", "it"),
    ],
)
def test_parse_accept_language(header, expected):
    assert parse_accept_language(header) == expected


def test_provider_reads_request_metadata():
    request = _request({"Accept-Language": "fr-FR,fr;q=0.9", "X-Correlation-ID": "abc123"})

    context = ContextProvider(default_locale="en").get(request, db="session")

    assert context.locale == "fr-FR"
    assert context.correlation_id == "abc123"
    assert context.request.method == "POST"
    assert context.request.path == "/api/scenario/register"
    assert context.request.client_ip == "10.0.0.7"
    assert context.request.headers["accept-language"] == "fr-FR,fr;q=0.9"
    assert context.attributes == {"db": "session"}


def test_provider_falls_back_to_default_locale_and_generated_id():
    context = ContextProvider(default_locale="fr").get(_request({}))

    assert context.locale == "fr"
    assert context.correlation_id


def test_request_headers_are_read_only():
    context = ContextProvider().get(_request({"X-Trace": "1"}))

    with pytest.raises(TypeError):
        context.request.headers["x-trace"] = "2"


def test_identity_is_read_only():
    context = ValidationContext.create(locale="fr")

    with pytest.raises(AttributeError):
        context.locale = "en"
    context.attributes["tenant"] = "acme"
    assert context.get("tenant") == "acme"
    assert context.get("missing", 42) == 42


def test_context_cannot_be_acquired_twice():
    context = ValidationContext.create()
    context.acquire()

    with pytest.raises(ContextInUseError):
        context.acquire()

    context.release()
    context.acquire()
    assert context.in_use
