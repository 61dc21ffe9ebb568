"""Filesystem-backed object storage."""

from __future__ import annotations

import logging
from pathlib import Path

from ecredit.exceptions import BackendUnavailableError
from ecredit.store.base import ObjectStorage

logger = logging.getLogger(__name__)


class LocalObjectStorage(ObjectStorage):
    """Store blobs as files under ``root_dir/<bucket>/<key>``."""

    def __init__(self, root_dir: str | Path, public_base_url: str) -> None:
        """Initialize local object storage.

        Parameters
        ----------
        root_dir : str | Path
            Directory holding one sub-directory per bucket.
        public_base_url : str
            Prefix for public URLs; ``<base>/<bucket>/<key>``.
        """
        self.root_dir = Path(root_dir)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, bucket: str, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid object key: {key!r}")
        return self.root_dir / bucket / key

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise BackendUnavailableError(f"Upload to {bucket}/{key} failed: {e}") from e
        logger.info("Uploaded %d bytes to %s/%s (%s)", len(data), bucket, key, content_type)
        return key

    def public_url(self, bucket: str, key: str) -> str:
        self._path(bucket, key)
        return f"{self.public_base_url}/{bucket}/{key}"

    def exists(self, bucket: str, key: str) -> bool:
        return self._path(bucket, key).is_file()
