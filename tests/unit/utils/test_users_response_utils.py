"""
统一响应工具单元测试
"""

import pytest
from flask import Flask
from werkzeug.exceptions import NotFound

from app.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, SuccessMessages
from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.utils.response_utils import jsonify_unified_error, unified_error_response, unified_success_response


@pytest.mark.unit
def test_unified_success_response_default():
    payload, status = unified_success_response()

    assert status == 200
    assert payload["success"] is True
    assert payload["error"] is False
    assert payload["message"] == SuccessMessages.OPERATION_SUCCESS
    assert "data" not in payload


@pytest.mark.unit
def test_unified_error_response_for_app_error():
    payload, status = unified_error_response(ValidationError(message_key="INVALID_SORT_FIELD"))

    assert status == 400
    assert payload["success"] is False
    assert payload["error"] is True
    assert payload["category"] == ErrorCategory.VALIDATION.value
    assert payload["severity"] == ErrorSeverity.LOW.value
    assert payload["message_code"] == "INVALID_SORT_FIELD"
    assert payload["message"] == ErrorMessages.INVALID_SORT_FIELD
    assert payload["recoverable"] is True


@pytest.mark.unit
def test_unified_error_response_status_mapping():
    assert unified_error_response(AuthorizationError())[1] == 403
    assert unified_error_response(NotFoundError(ErrorMessages.SITE_NOT_FOUND))[1] == 404


@pytest.mark.unit
def test_unified_error_response_for_client_http_exception():
    payload, status = unified_error_response(NotFound())

    assert status == 404
    assert payload["message_code"] == "INVALID_REQUEST"
    assert payload["recoverable"] is True


@pytest.mark.unit
def test_unified_error_response_hides_unexpected_error_details():
    payload, status = unified_error_response(RuntimeError("db password leaked"))

    assert status == 500
    assert payload["message_code"] == "INTERNAL_ERROR"
    assert payload["message"] == ErrorMessages.INTERNAL_ERROR
    assert "leaked" not in payload["message"]
    assert payload["recoverable"] is False


@pytest.mark.unit
def test_jsonify_unified_error():
    app = Flask(__name__)
    with app.app_context():
        response, status = jsonify_unified_error(ValidationError("bad"), extra={"field": "paged"})

    assert status == 400
    body = response.get_json()
    assert body["message"] == "bad"
    assert body["extra"] == {"field": "paged"}
