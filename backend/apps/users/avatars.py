import os
import uuid
from pathlib import Path
from typing import Optional

from django.conf import settings
from django.core.files.storage import FileSystemStorage

from apps.common import get_logger

logger = get_logger(__name__).bind(component="users", layer="storage")

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
_REMOTE_PREFIXES = ("http://", "https://")


class AvatarStorage:
    """Avatar files below ``<public_root>/<upload_dir>``.

    Stored avatars are referenced by their web path (``/img/avatars/<file>``).
    Absolute URLs belong to external providers and are never touched.
    """

    def __init__(self, public_root=None, upload_dir: Optional[str] = None):
        self._public_root = public_root
        self._upload_dir = upload_dir

    # Settings are read per call so overrides apply to long lived instances.
    @property
    def public_root(self) -> Path:
        return Path(self._public_root or settings.PUBLIC_ROOT)

    @property
    def upload_dir(self) -> str:
        return (self._upload_dir or settings.AVATAR_UPLOAD_DIR).strip("/")

    @property
    def storage(self) -> FileSystemStorage:
        return FileSystemStorage(location=str(self.public_root / self.upload_dir))

    @staticmethod
    def is_local(avatar: Optional[str]) -> bool:
        return bool(avatar) and not avatar.startswith(_REMOTE_PREFIXES)

    def _filename(self, upload) -> str:
        ext = os.path.splitext(getattr(upload, "name", "") or "")[1].lower()
        if ext not in _EXTENSIONS.values():
            ext = _EXTENSIONS.get(getattr(upload, "content_type", ""), "")
        return f"avatar-{uuid.uuid4().hex}{ext}"

    def path_for(self, avatar: str) -> Optional[Path]:
        root = self.public_root.resolve()
        candidate = (root / avatar.lstrip("/")).resolve()
        if root not in candidate.parents:
            return None
        return candidate

    def save(self, upload) -> str:
        storage = self.storage
        name = self._filename(upload)
        try:
            name = storage.save(name, upload)
        except Exception:
            logger.exception("Avatar write failed", path=name)
            if storage.exists(name):
                storage.delete(name)
            raise
        web_path = f"/{self.upload_dir}/{name}"
        logger.info("Avatar stored", path=web_path, size=getattr(upload, "size", None))
        return web_path

    def exists(self, avatar: Optional[str]) -> bool:
        if not self.is_local(avatar):
            return False
        path = self.path_for(avatar)
        return path is not None and path.is_file()

    def delete(self, avatar: Optional[str]) -> bool:
        """Remove a local avatar file. Failures are logged, never raised."""
        if not self.is_local(avatar):
            return False
        path = self.path_for(avatar)
        if path is None:
            logger.warning("Refusing to delete avatar outside public root", path=avatar)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Could not delete avatar", path=avatar, error=str(exc))
            return False
        logger.info("Avatar deleted", path=avatar)
        return True
