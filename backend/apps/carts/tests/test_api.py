from rest_framework import status
from rest_framework.test import APITestCase

from apps.carts.container import build_cart_store
from apps.users.models import User

URL = "/api/cart/"


class CartApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="shopper", email="shopper@example.com", password="Secret123", name="Shopper"
        )

    def put_items(self, items):
        return self.client.put(URL, {"items": items}, format="json")

    def test_anonymous_cart_starts_empty(self):
        res = self.client.get(URL)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, {"items": {}, "totalQty": 0, "totalCents": 0})

    def test_anonymous_cart_lives_in_session(self):
        res = self.put_items({"k1": {"qty": 2, "price": 1999}})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["totalQty"], 2)
        self.assertEqual(res.data["totalCents"], 3998)
        again = self.client.get(URL)
        self.assertEqual(again.data["items"], {"k1": {"qty": 2, "price": 1999}})

    def test_authenticated_cart_is_stored(self):
        self.client.force_login(self.user)
        self.put_items({"k1": {"qty": 1, "price": 500, "name": "Cable"}})
        stored = build_cart_store().load(self.user.id)
        self.assertEqual(stored["totalCents"], 500)
        self.assertEqual(stored["items"]["k1"]["name"], "Cable")

    def test_stored_cart_follows_user_to_new_session(self):
        self.client.force_login(self.user)
        self.put_items({"k1": {"qty": 3, "price": 100}})
        self.client.logout()
        self.assertEqual(self.client.get(URL).data["totalQty"], 0)
        self.client.force_login(self.user)
        res = self.client.get(URL)
        self.assertEqual(res.data["totalQty"], 3)
        self.assertEqual(res.data["totalCents"], 300)

    def test_invalid_items_are_rejected(self):
        res = self.put_items({"k1": {"qty": -2, "price": 100}})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_delete_empties_cart_and_stored_row(self):
        self.client.force_login(self.user)
        self.put_items({"k1": {"qty": 1, "price": 100}})
        res = self.client.delete(URL)
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNone(build_cart_store().load(self.user.id))
        self.assertEqual(self.client.get(URL).data["totalQty"], 0)
