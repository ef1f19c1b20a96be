import shutil
import tempfile
from pathlib import Path

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User

PROFILE_URL = "/api/profile/"
PASSWORD_URL = "/api/profile/change-password/"


class ProfileApiTests(APITestCase):
    def setUp(self):
        self.public_root = Path(tempfile.mkdtemp())
        self.settings_override = override_settings(PUBLIC_ROOT=self.public_root)
        self.settings_override.enable()
        self.user = User.objects.create_user(
            username="lan",
            email="lan@example.com",
            password="Secret123",
            name="Lan",
            phone="0912345678",
        )
        self.client.force_login(self.user)

    def tearDown(self):
        self.settings_override.disable()
        shutil.rmtree(self.public_root, ignore_errors=True)

    def image(self, name="me.png"):
        return SimpleUploadedFile(name, b"\x89PNGdata", content_type="image/png")

    def test_requires_login(self):
        self.client.logout()
        res = self.client.get(PROFILE_URL)
        self.assertIn(res.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_get_profile(self):
        res = self.client.get(PROFILE_URL)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Lan")
        self.assertEqual(res.data["phone"], "0912345678")
        self.assertFalse(res.data["avatarExists"])
        self.assertTrue(res.data["canChangePassword"])

    def test_update_with_avatar_replaces_old_file(self):
        old = self.public_root / "img" / "avatars" / "old.png"
        old.parent.mkdir(parents=True)
        old.write_bytes(b"old")
        User.objects.filter(pk=self.user.pk).update(avatar="/img/avatars/old.png")

        res = self.client.post(
            PROFILE_URL,
            {"name": "Lan Tran", "phone": "", "address": "1 Hang Bai", "avatar": self.image()},
            format="multipart",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Lan Tran")
        self.assertIsNone(self.user.phone)
        self.assertTrue(self.user.avatar.startswith("/img/avatars/avatar-"))
        self.assertTrue((self.public_root / self.user.avatar.lstrip("/")).is_file())
        self.assertFalse(old.exists())
        self.assertTrue(res.data["avatarExists"])
        self.assertEqual(self.client.session["user"]["name"], "Lan Tran")
        self.assertEqual(self.client.session["user"]["avatar"], self.user.avatar)

    def test_url_avatar_kept_without_upload(self):
        url = "https://lh3.googleusercontent.com/a/me.jpg"
        User.objects.filter(pk=self.user.pk).update(avatar=url)
        res = self.client.patch(PROFILE_URL, {"address": "2 Trang Tien"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.avatar, url)
        self.assertEqual(self.user.phone, "0912345678")

    def test_invalid_update_leaves_row_and_disk_unchanged(self):
        res = self.client.post(
            PROFILE_URL,
            {"name": "", "phone": "12", "avatar": self.image()},
            format="multipart",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("phone", res.data["error"]["details"])
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Lan")
        avatar_dir = self.public_root / "img" / "avatars"
        self.assertFalse(avatar_dir.exists() and any(avatar_dir.iterdir()))

    def test_change_password_keeps_session(self):
        res = self.client.post(
            PASSWORD_URL,
            {"current_password": "Secret123", "new_password": "Better456", "confirm_password": "Better456"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Better456"))
        self.assertEqual(self.client.get(PROFILE_URL).status_code, status.HTTP_200_OK)

    def test_google_account_cannot_change_password(self):
        User.objects.filter(pk=self.user.pk).update(google_id="google-1")
        res = self.client.post(
            PASSWORD_URL,
            {"current_password": "Secret123", "new_password": "Better456", "confirm_password": "Better456"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Secret123"))

    def test_wrong_current_password(self):
        res = self.client.post(
            PASSWORD_URL,
            {"current_password": "nope", "new_password": "Better456", "confirm_password": "Better456"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["message"], "Current password is incorrect")
