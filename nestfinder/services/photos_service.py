# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import event
from sqlalchemy.orm import Session

from nestfinder.infrastructure.storage import ObjectStorage
from nestfinder.shared.errors.base import InvalidUploadError
from nestfinder.shared.logging import logger

_EXT_RE = re.compile(r"^[a-z0-9]{1,8}$")


@dataclass(slots=True, frozen=True)
class PhotoUpload:
    filename: str
    content_type: str
    data: bytes


def _extension(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return ext if _EXT_RE.match(ext) else "jpg"


def discard_photos(storage: ObjectStorage, urls: Sequence[str]) -> None:
    for url in urls:
        try:
            storage.delete(url)
        except OSError as exc:
            logger.warning(f"photos: could not delete {url}: {exc}")
    if urls:
        logger.info(f"photos: discarded n={len(urls)}")


def store_photos(
    storage: ObjectStorage, uploads: Sequence[PhotoUpload], path_prefix: str
) -> list[str]:
    """Validate every upload, then store them all and return their URLs.

    Nothing is written unless the whole batch is acceptable, and a write that
    fails part-way removes the files stored before it.
    """
    if not uploads:
        raise InvalidUploadError("No files provided", code="no_files")

    for upload in uploads:
        storage.check(upload.content_type, len(upload.data), upload.filename)

    urls: list[str] = []
    try:
        for upload in uploads:
            path = f"{path_prefix}/{uuid.uuid4()}.{_extension(upload.filename)}"
            urls.append(storage.store(upload.data, upload.content_type, path))
    except Exception:
        discard_photos(storage, urls)
        raise
    logger.info(f"photos: stored n={len(urls)} prefix={path_prefix}")
    return urls


def discard_on_rollback(db: Session, storage: ObjectStorage, urls: Sequence[str]) -> None:
    """Delete the stored ``urls`` again if ``db``'s transaction is rolled back."""
    stored = list(urls)

    def _discard(session: Session) -> None:
        discard_photos(storage, stored)

    event.listen(db, "after_rollback", _discard, once=True)


__all__ = ["PhotoUpload", "discard_on_rollback", "discard_photos", "store_photos"]
