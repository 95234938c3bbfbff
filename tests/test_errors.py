from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from core.errors import (
    AppError,
    DatabaseErrorMapper,
    Err,
    ErrorCode,
    Ok,
    raise_error,
    register_error_handlers,
)
from core.validation import PredicateExecutionError


def test_error_codes_map_to_http_status():
    assert ErrorCode.E2000_VALIDATION_GENERIC.http_status == 400
    assert ErrorCode.E2030_PREDICATE_FAILED.http_status == 502
    assert ErrorCode.E1002_TIMEOUT.http_status == 503
    assert ErrorCode.E4011_DUPLICATE_KEY.http_status == 409
    assert ErrorCode.E9001_UNEXPECTED_ERROR.http_status == 500


def test_with_context_keeps_correlation_id_when_missing():
    error = AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message="bad")

    updated = error.with_context(correlation_id=None, origin="validation")

    assert updated.context.correlation_id == error.context.correlation_id
    assert updated.context.origin == "validation"


def test_result_pattern_matching():
    match Ok(3).map(lambda v: v + 1):
        case Ok(value):
            assert value == 4
        case Err():
            raise AssertionError("expected Ok")
    assert Err(AppError(ErrorCode.E9000_INTERNAL_GENERIC, "x")).unwrap_or(7) == 7


def test_database_mapper_detects_duplicates():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

    error = DatabaseErrorMapper("users").map_exception(exc)

    assert error.code is ErrorCode.E4011_DUPLICATE_KEY
    assert error.context.origin == "users"


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/essential")
    async def essential():
        raise PredicateExecutionError("directory", "handle", ConnectionError("down"))

    @app.get("/slow")
    async def slow():
        raise PredicateExecutionError("directory", "handle", TimeoutError())

    @app.get("/conflict")
    async def conflict():
        raise_error(AppError(code=ErrorCode.E4011_DUPLICATE_KEY, message="exists"))

    return app


def test_predicate_failures_map_to_dependency_errors():
    client = TestClient(_app())

    response = client.get("/essential", headers={"X-Correlation-ID": "corr-1"})
    assert response.status_code == 502
    body = response.json()["error"]
    assert body["code"] == "E2030_PREDICATE_FAILED"
    assert body["correlation_id"] == "corr-1"

    assert client.get("/slow").status_code == 503


def test_app_error_exception_and_http_errors():
    client = TestClient(_app())

    assert client.get("/conflict").status_code == 409
    missing = client.get("/nowhere")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "E4010_NOT_FOUND"
