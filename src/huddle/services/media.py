"""Blob storage for post media, avatars and covers.

Objects are addressed by ``<namespace>/<owner_id>/<generated filename>``
inside a bucket and exposed through a public URL.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from huddle.core.errors import StoreError
from huddle.core.settings import settings

logger = logging.getLogger(__name__)

__all__ = [
    "LocalMediaStorage",
    "MediaStorage",
    "MediaUpload",
    "build_media_path",
    "get_media_storage",
    "media_path_from_url",
    "media_type_for",
]


@dataclass(frozen=True)
class MediaUpload:
    """An uploaded file held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot and ext else "bin"


class MediaStorage(Protocol):
    """Minimal blob store interface."""

    def upload(self, path: str, upload: MediaUpload, *, overwrite: bool = False) -> None: ...

    def public_url(self, path: str) -> str: ...

    def remove(self, paths: list[str]) -> None: ...


def build_media_path(namespace: str, owner_id: str, extension: str, prefix: str = "") -> str:
    """Return ``namespace/owner_id/<prefix><uuid>.<extension>``."""
    return f"{namespace}/{owner_id}/{prefix}{uuid.uuid4()}.{extension}"


def media_path_from_url(url: str) -> str:
    """Recover the object path from a public URL (its last three segments)."""
    return "/".join(url.rstrip("/").split("/")[-3:])


def media_type_for(content_type: str | None) -> str | None:
    """Map a MIME type to the post media type, or ``None`` if unsupported."""
    if not content_type:
        return None
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("audio/"):
        return "audio"
    return None


class LocalMediaStorage:
    """Filesystem-backed storage serving files under ``base_url``."""

    def __init__(
        self,
        root: str | Path | None = None,
        base_url: str | None = None,
        bucket: str | None = None,
    ) -> None:
        self.bucket = bucket or settings.media_bucket
        self.root = Path(root or settings.media_root) / self.bucket
        self.base_url = (base_url or settings.media_base_url).rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StoreError("Invalid media path", path=path)
        return target

    def upload(self, path: str, upload: MediaUpload, *, overwrite: bool = False) -> None:
        target = self._resolve(path)
        if target.exists() and not overwrite:
            raise StoreError("Media object already exists", path=path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(upload.data)
        except OSError as exc:
            raise StoreError("Media upload failed", path=path) from exc

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path}"

    def remove(self, paths: list[str]) -> None:
        for path in paths:
            try:
                self._resolve(path).unlink(missing_ok=True)
            except OSError as exc:
                raise StoreError("Media removal failed", path=path) from exc


_storage: MediaStorage | None = None


def get_media_storage() -> MediaStorage:
    """Return the process-wide media storage."""
    global _storage
    if _storage is None:
        _storage = LocalMediaStorage()
    return _storage
