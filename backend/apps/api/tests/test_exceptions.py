import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ParseError, ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import (
    KIND_STATUS,
    ApplicationError,
    ErrorKind,
    global_exception_handler,
    status_for_kind,
)

factory = APIRequestFactory()


class DummyView:
    pass


class MissingThing(ApplicationError):
    kind = ErrorKind.NOT_FOUND


class BrokenThing(ApplicationError):
    kind = ErrorKind.REMOTE_FAILURE


def _context(request):
    return {"request": request, "view": DummyView()}


def test_every_error_kind_has_a_status():
    assert set(KIND_STATUS) == set(ErrorKind)
    assert status_for_kind(ErrorKind.NOT_FOUND) == 404
    assert status_for_kind(ErrorKind.OPERATION_INVALID) == 400
    assert status_for_kind(ErrorKind.REMOTE_FAILURE) == 500
    assert status_for_kind(ErrorKind.UNEXPECTED) == 500


def test_unmapped_kind_is_rejected():
    with pytest.raises(ValueError):
        status_for_kind("TEAPOT")


def test_client_visible_error_surfaces_message():
    exc = MissingThing("Cart not found for user ID: 7", details={"user_id": 7})
    response = global_exception_handler(exc, _context(factory.get("/shopping/send-cart")))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data == {
        "status": "ERROR",
        "message": "Cart not found for user ID: 7",
        "data": None,
    }


def test_server_side_error_hides_message():
    exc = BrokenThing("product-service responded with status 503")
    assert not exc.is_client_visible
    response = global_exception_handler(exc, _context(factory.get("/shopping/send-cart")))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data["message"] == "Something went wrong"


def test_public_message_uses_fallback():
    exc = ApplicationError("database exploded")
    assert exc.kind is ErrorKind.UNEXPECTED
    assert exc.public_message("An unexpected error occurred") == "An unexpected error occurred"
    assert exc.to_response("x").status_code == 500


def test_validation_error_reports_first_field():
    request = factory.post("/payment/create", data={})
    exc = ValidationError({"orderId": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["status"] == "ERROR"
    assert response.data["message"] == "orderId: This field is required."
    assert response.data["data"] is None


def test_django_validation_error_is_converted():
    exc = DjangoValidationError({"total": ["Must be positive."]})
    response = global_exception_handler(exc, _context(factory.post("/payment/create")))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message"] == "total: Must be positive."


def test_parse_and_auth_errors_keep_their_status():
    parse = global_exception_handler(ParseError(), _context(factory.post("/x")))
    assert parse.status_code == status.HTTP_400_BAD_REQUEST
    assert parse.data["message"].startswith("Malformed")
    auth = global_exception_handler(
        AuthenticationFailed("Given token not valid"), _context(factory.get("/x"))
    )
    assert auth.status_code == status.HTTP_401_UNAUTHORIZED
    assert auth.data["message"] == "Given token not valid"


def test_http404_is_enveloped():
    response = global_exception_handler(Http404(), _context(factory.get("/x")))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data["status"] == "ERROR"


def test_unhandled_exception_returns_generic_message():
    response = global_exception_handler(RuntimeError("boom"), _context(factory.get("/x")))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data == {"status": "ERROR", "message": "Something went wrong", "data": None}
