import unittest

from apps.carts.exceptions import CartPayloadError
from apps.carts.serializers import CartWriteSerializer, validate_cart_payload
from apps.carts.utils import empty_cart, recalculate_totals


class ValidateCartPayloadTests(unittest.TestCase):
    def test_valid_payload_keeps_extra_keys(self):
        payload = {
            "items": {"sku1": {"qty": 2, "price": 1500, "name": "Keycap set"}},
            "totalQty": 2,
            "totalCents": 3000,
        }
        self.assertEqual(validate_cart_payload(payload), payload)

    def test_empty_cart_is_valid(self):
        self.assertEqual(validate_cart_payload(empty_cart()), empty_cart())

    def test_non_mapping_is_rejected(self):
        with self.assertRaises(CartPayloadError) as ctx:
            validate_cart_payload(["not", "a", "cart"])
        self.assertIn("non_field_errors", ctx.exception.errors)

    def test_missing_totals_are_reported(self):
        with self.assertRaises(CartPayloadError) as ctx:
            validate_cart_payload({"items": {}})
        self.assertIn("totalQty", ctx.exception.errors)
        self.assertIn("totalCents", ctx.exception.errors)

    def test_negative_quantity_is_rejected(self):
        payload = {"items": {"a": {"qty": -1, "price": 10}}, "totalQty": 0, "totalCents": 0}
        with self.assertRaises(CartPayloadError) as ctx:
            validate_cart_payload(payload)
        self.assertIn("items", ctx.exception.errors)

    def test_items_must_be_mapping(self):
        with self.assertRaises(CartPayloadError):
            validate_cart_payload({"items": [], "totalQty": 0, "totalCents": 0})


class CartWriteSerializerTests(unittest.TestCase):
    def test_line_item_extras_survive(self):
        s = CartWriteSerializer(data={"items": {"x": {"qty": 1, "price": 99, "name": "Switch"}}})
        self.assertTrue(s.is_valid(), s.errors)
        self.assertEqual(s.validated_data["items"]["x"]["name"], "Switch")

    def test_price_required(self):
        s = CartWriteSerializer(data={"items": {"x": {"qty": 1}}})
        self.assertFalse(s.is_valid())


class RecalculateTotalsTests(unittest.TestCase):
    def test_totals_follow_items(self):
        cart = recalculate_totals(
            {
                "items": {
                    "a": {"qty": 2, "price": 500, "name": "Cable"},
                    "b": {"qty": 1, "price": 1200},
                },
                "totalQty": 99,
                "totalCents": 1,
            }
        )
        self.assertEqual(cart["totalQty"], 3)
        self.assertEqual(cart["totalCents"], 2200)
        self.assertEqual(cart["items"]["a"]["name"], "Cable")

    def test_empty_items(self):
        self.assertEqual(recalculate_totals({"items": {}}), empty_cart())
