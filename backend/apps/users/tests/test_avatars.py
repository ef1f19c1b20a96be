import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.users.avatars import AvatarStorage


class AvatarStorageTests(unittest.TestCase):
    def setUp(self):
        self.root = Path(tempfile.mkdtemp())
        self.avatars = AvatarStorage(public_root=self.root, upload_dir="img/avatars")

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_save_returns_web_path_under_upload_dir(self):
        upload = SimpleUploadedFile("Me.PNG", b"\x89PNGdata", content_type="image/png")
        path = self.avatars.save(upload)
        self.assertTrue(path.startswith("/img/avatars/avatar-"))
        self.assertTrue(path.endswith(".png"))
        self.assertTrue((self.root / path.lstrip("/")).is_file())
        self.assertTrue(self.avatars.exists(path))

    def test_extension_falls_back_to_content_type(self):
        upload = SimpleUploadedFile("blob", b"data", content_type="image/jpeg")
        self.assertTrue(self.avatars.save(upload).endswith(".jpg"))

    def test_delete_local_avatar(self):
        target = self.root / "img" / "avatars" / "old.png"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"x")
        self.assertTrue(self.avatars.delete("/img/avatars/old.png"))
        self.assertFalse(target.exists())

    def test_missing_file_delete_is_quiet(self):
        self.assertFalse(self.avatars.delete("/img/avatars/gone.png"))

    def test_remote_urls_are_never_touched(self):
        url = "https://lh3.googleusercontent.com/a/photo.jpg"
        self.assertFalse(self.avatars.is_local(url))
        self.assertFalse(self.avatars.exists(url))
        self.assertFalse(self.avatars.delete(url))

    def test_paths_outside_root_are_refused(self):
        outside = self.root.parent / f"{self.root.name}-outside.txt"
        outside.write_text("keep")
        try:
            self.assertFalse(self.avatars.delete(f"/../{outside.name}"))
            self.assertTrue(outside.exists())
        finally:
            outside.unlink()

    def test_empty_avatar(self):
        self.assertFalse(self.avatars.is_local(None))
        self.assertFalse(self.avatars.exists(""))

    def test_failed_write_leaves_no_partial_file(self):
        def write_then_fail(storage, name, content):
            target = Path(storage.path(name))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"\x89PN")
            raise OSError(28, "No space left on device")

        upload = SimpleUploadedFile("me.png", b"\x89PNGdata", content_type="image/png")
        with mock.patch.object(
            FileSystemStorage, "_save", autospec=True, side_effect=write_then_fail
        ):
            with self.assertRaises(OSError):
                self.avatars.save(upload)
        avatar_dir = self.root / "img" / "avatars"
        self.assertEqual(list(avatar_dir.iterdir()), [])
