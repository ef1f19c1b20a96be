from collections.abc import Mapping
from typing import Any, Dict

from rest_framework import serializers

from .exceptions import CartPayloadError


class PreserveUnknownFieldsMixin:
    """Keep keys the serializer does not declare in ``validated_data``."""

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        extras = {
            key: value
            for key, value in data.items()
            if key not in self.fields
        }
        return {**extras, **validated}


class LineItemSerializer(PreserveUnknownFieldsMixin, serializers.Serializer):
    qty = serializers.IntegerField(min_value=0)
    price = serializers.IntegerField(min_value=0, help_text="Unit price in cents")


class CartPayloadSerializer(PreserveUnknownFieldsMixin, serializers.Serializer):
    items = serializers.DictField(child=LineItemSerializer())
    totalQty = serializers.IntegerField(min_value=0)
    totalCents = serializers.IntegerField(min_value=0)


class CartWriteSerializer(serializers.Serializer):
    # Totals are always recomputed server side.
    items = serializers.DictField(child=LineItemSerializer())


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def validate_cart_payload(payload: Any) -> Dict[str, Any]:
    """Validate ``payload`` against the cart shape and return a plain dict copy.

    Raises CartPayloadError when the payload is not an object or any field is
    missing or malformed.
    """
    if not isinstance(payload, Mapping):
        raise CartPayloadError(
            "Cart payload must be a JSON object",
            {"non_field_errors": [f"Expected an object, got {type(payload).__name__}"]},
        )
    serializer = CartPayloadSerializer(data=payload)
    if not serializer.is_valid():
        raise CartPayloadError("Cart payload is malformed", serializer.errors)
    return _plain(serializer.validated_data)
