# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Photo object storage on the local filesystem."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from nestfinder.shared.errors.base import InvalidUploadError
from nestfinder.shared.logging import logger

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ObjectStorage(Protocol):
    def check(self, content_type: str, size: int, filename: str) -> None: ...

    def store(self, data: bytes, content_type: str, path: str) -> str: ...

    def delete(self, url: str) -> None: ...


class LocalObjectStorage(ObjectStorage):
    """Stores blobs under ``<root>/<bucket>/`` and returns their public URL."""

    def __init__(
        self,
        root: Path,
        *,
        public_url: str = "/uploads",
        bucket: str = "listing-photos",
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self._root = root.resolve()
        self._bucket = bucket
        self._public_url = public_url.rstrip("/")
        self.max_bytes = max_bytes
        (self._root / bucket).mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, relative_path: str) -> Path:
        base = (self._root / self._bucket).resolve()
        path = (base / relative_path).resolve()
        if not path.is_relative_to(base):
            raise InvalidUploadError("Invalid upload path")
        return path

    def check(self, content_type: str, size: int, filename: str) -> None:
        if not (content_type or "").startswith("image/"):
            raise InvalidUploadError(f"Invalid file type: {content_type}")
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise InvalidUploadError(f"File too large: {filename} (max {limit_mb}MB)")

    def store(self, data: bytes, content_type: str, path: str) -> str:
        self.check(content_type, len(data), path.rsplit("/", 1)[-1])
        file_path = self._resolve(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
        logger.debug(f"storage: write path={file_path} size={len(data)}")
        return f"{self._public_url}/{self._bucket}/{path}"

    def delete(self, url: str) -> None:
        prefix = f"{self._public_url}/{self._bucket}/"
        if not url.startswith(prefix):
            return
        file_path = self._resolve(url[len(prefix):])
        file_path.unlink(missing_ok=True)
        logger.debug(f"storage: delete path={file_path}")


__all__ = ["LocalObjectStorage", "MAX_UPLOAD_BYTES", "ObjectStorage"]
