import pytest

from core.validation import ValidationError, Violation, ViolationOutcome, ViolationReport


def _report() -> ViolationReport:
    return ViolationReport((
        Violation("products[0].sku", "required", "products[0].sku is required"),
        Violation("products[2].price", "range", "products[2].price must be between 0.01 and 2000"),
        Violation("products[2].price", "custom", "could not be validated", outcome=ViolationOutcome.ERROR),
    ))


def test_empty_report_is_valid():
    report = ViolationReport()

    assert report.is_valid
    assert not report
    report.raise_if_invalid()


def test_report_helpers():
    report = _report()

    assert not report.is_valid
    assert report.has_errors
    assert report.field_paths == ("products[0].sku", "products[2].price", "products[2].price")
    assert len(report.for_field("products[2].price")) == 2
    assert list(report.by_field()) == ["products[0].sku", "products[2].price"]


def test_to_dict_marks_errors_only():
    rendered = _report().to_dict()

    assert rendered[0] == {"field": "products[0].sku", "rule": "required", "message": "products[0].sku is required"}
    assert rendered[2]["outcome"] == "error"


def test_raise_if_invalid_carries_report():
    report = _report()

    with pytest.raises(ValidationError) as exc_info:
        report.raise_if_invalid()

    assert exc_info.value.report is report
    error = exc_info.value.to_app_error()
    assert error.code.http_status == 400
    assert error.metadata["error_count"] == 3
    assert error.metadata["errors"][1]["field"] == "products[2].price"


def test_from_pydantic_errors_formats_locations():
    report = ViolationReport.from_pydantic_errors([
        {"loc": ("body", "products", 1, "price"), "type": "float_parsing", "msg": "Input should be a valid number"},
        {"loc": ("body",), "type": "json_invalid", "msg": "JSON decode error"},
    ])

    assert report.field_paths == ("products[1].price", "$")
    assert report.violations[0].rule_kind == "float_parsing"
