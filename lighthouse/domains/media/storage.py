"""Image storage on the local filesystem.

Files live under ``<root>/<bucket>/<folder>/`` and are served publicly from
``/media/<folder>/<name>``. Every operation reports through a
``StorageResult``; filesystem errors are logged and returned, not raised.
"""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "products"
DEFAULT_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})
MEDIA_URL_PREFIX = "/media"

_FOLDER_UNSAFE = re.compile(r"[^a-z0-9/_-]", re.IGNORECASE)
_NAME_UNSAFE = re.compile(r"[^a-z0-9_-]", re.IGNORECASE)


@dataclass
class StorageResult:
    ok: bool
    error: Optional[str] = None
    path: Optional[str] = None
    url: Optional[str] = None
    files: list[dict] = field(default_factory=list)
    created: bool = False


def _clean_folder(folder: str) -> str:
    parts = [part for part in (folder or "").split("/") if part and part not in (".", "..")]
    return _FOLDER_UNSAFE.sub("_", "/".join(parts))


def display_name(filename: str) -> str:
    """Human label for a stored file: drop the timestamp prefix and extension."""
    stem = re.sub(r"^\d+_", "", filename)
    stem = os.path.splitext(stem)[0]
    return stem.replace("_", " ")


class MediaStorage:
    def __init__(self, root: str | os.PathLike, bucket: str, *, allowed_extensions: Iterable[str] = DEFAULT_EXTENSIONS):
        self.root = Path(root)
        self.bucket = bucket
        self.allowed_extensions = {ext.lower().lstrip(".") for ext in allowed_extensions}

    @classmethod
    def from_app(cls, app) -> "MediaStorage":
        return cls(
            app.config["UPLOAD_FOLDER"],
            app.config.get("MEDIA_BUCKET", "lighthouse-assets"),
            allowed_extensions=app.config.get("UPLOAD_ALLOWED_EXTENSIONS", DEFAULT_EXTENSIONS),
        )

    @property
    def bucket_path(self) -> Path:
        return self.root / self.bucket

    def public_url(self, path: str) -> str:
        return f"{MEDIA_URL_PREFIX}/{path}"

    def ensure_bucket(self) -> StorageResult:
        exists = self.bucket_path.is_dir()
        try:
            self.bucket_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create media bucket %s: %s", self.bucket_path, exc)
            return StorageResult(ok=False, error=str(exc))
        return StorageResult(ok=True, created=not exists)

    def upload_image(self, file: Optional[FileStorage], folder: str = DEFAULT_FOLDER) -> StorageResult:
        if file is None or not file.filename:
            return StorageResult(ok=False, error="No image file provided.")

        original = secure_filename(file.filename) or "image"
        stem, ext = os.path.splitext(original)
        ext = ext.lower() or ".jpg"
        if ext.lstrip(".") not in self.allowed_extensions:
            return StorageResult(ok=False, error="Unsupported file type.")
        base = _NAME_UNSAFE.sub("_", stem) or "image"

        safe_folder = _clean_folder(folder) or DEFAULT_FOLDER
        relative = f"{safe_folder}/{int(time.time() * 1000)}_{base}{ext}"

        ensured = self.ensure_bucket()
        if not ensured.ok:
            return ensured
        target = self.bucket_path / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.exists():
                return StorageResult(ok=False, error="A file with that name already exists.")
            file.save(str(target))
        except OSError as exc:
            logger.error("Upload to %s failed: %s", relative, exc)
            return StorageResult(ok=False, error="Could not store the image.")

        logger.info("Stored media file %s", relative)
        return StorageResult(ok=True, path=relative, url=self.public_url(relative))

    def list_folder(self, folder: str = "") -> StorageResult:
        safe_folder = _clean_folder(folder)
        directory = self.bucket_path / safe_folder if safe_folder else self.bucket_path
        if not directory.is_dir():
            return StorageResult(ok=True, files=[])
        try:
            entries = sorted((entry for entry in directory.iterdir() if entry.is_file()), key=lambda e: e.name)
        except OSError as exc:
            logger.error("Could not list media folder %s: %s", safe_folder, exc)
            return StorageResult(ok=False, error=str(exc))

        files = []
        for entry in entries:
            path = f"{safe_folder}/{entry.name}" if safe_folder else entry.name
            files.append(
                {
                    "name": entry.name,
                    "path": path,
                    "url": self.public_url(path),
                    "size": entry.stat().st_size,
                }
            )
        return StorageResult(ok=True, files=files)

    def resolve(self, path: str) -> Optional[Path]:
        """Absolute location of a stored file, or None if it escapes the bucket."""
        if not path:
            return None
        base = self.bucket_path.resolve()
        candidate = (base / path.lstrip("/")).resolve()
        if candidate == base or base not in candidate.parents:
            return None
        return candidate

    def delete_file(self, path: str) -> StorageResult:
        target = self.resolve(path)
        if target is None:
            return StorageResult(ok=False, error="Invalid file path.")
        if not target.is_file():
            return StorageResult(ok=False, error="File not found.")
        try:
            target.unlink()
        except OSError as exc:
            logger.error("Could not delete media file %s: %s", path, exc)
            return StorageResult(ok=False, error="Could not delete the file.")
        logger.info("Deleted media file %s", path)
        return StorageResult(ok=True, path=path)


__all__ = ["MediaStorage", "StorageResult", "display_name"]
