from django.core.exceptions import RequestDataTooBig
from rest_framework import status
from rest_framework.exceptions import MethodNotAllowed, NotAuthenticated, ValidationError
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from apps.api.exceptions import global_exception_handler
from apps.carts.exceptions import CartPayloadError

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_validation_error_preserves_details():
    request = factory.post("/api/profile/", data={})
    exc = ValidationError({"name": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"name": ["This field is required."]}


def test_not_authenticated_carries_login_hint():
    request = factory.get("/api/profile/")
    response = global_exception_handler(NotAuthenticated(), _context(request))
    payload = response.data["error"]
    assert payload["code"] == "UNAUTHORIZED"
    assert payload["hint"] == "Log in again"


def test_cart_payload_error_maps_to_unprocessable_entity():
    request = factory.put("/api/cart/", data={}, format="json")
    exc = CartPayloadError("Cart payload is malformed", {"totalQty": ["A valid integer is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert payload["code"] == "UNPROCESSABLE_ENTITY"
    assert payload["details"] == {"totalQty": ["A valid integer is required."]}


def test_request_data_too_big_maps_to_413():
    request = factory.post("/api/profile/")
    response = global_exception_handler(RequestDataTooBig("too big"), _context(request))
    assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    assert response.data["error"]["code"] == "PAYLOAD_TOO_LARGE"


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/cart/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload


class ReadOnlyView(APIView):
    def get(self, request):
        return None


def test_method_not_allowed_lists_view_methods():
    request = factory.post("/api/cart/")
    context = {"request": request, "view": ReadOnlyView()}
    response = global_exception_handler(MethodNotAllowed("POST"), context)
    payload = response.data["error"]
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert payload["code"] == "METHOD_NOT_ALLOWED"
    assert payload["details"] == {"allowedMethods": ["GET", "OPTIONS"]}


def test_method_not_allowed_without_view_has_no_details():
    request = factory.post("/api/cart/")
    response = global_exception_handler(MethodNotAllowed("POST"), {"request": request})
    assert "details" not in response.data["error"]
