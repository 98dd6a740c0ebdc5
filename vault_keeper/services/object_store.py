"""
Storage for file payloads.

Payloads are addressed by an opaque key (the record's cloud_id). The record
service only needs put/get/delete; the filesystem store keeps one file per
key under ``<root>/<bucket>/`` and the in-memory store backs the tests.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Union

from ..exceptions import ErrorCode, ObjectStoreError, ValidationError, not_found
from ..utils.logger import get_logger


def _check_key(key: str) -> str:
    if not key or "/" in key or "\\" in key or key in (".", ".."):
        raise ValidationError(
            "Object key must be a single path segment",
            field="key",
            error_code=ErrorCode.INVALID_FORMAT,
        )
    return key


class ObjectStore(ABC):
    """Key/value store for opaque payloads."""

    @abstractmethod
    def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist yet."""

    @abstractmethod
    def upload(self, key: str, data: bytes) -> None:
        """Store data under key, replacing any previous payload."""

    @abstractmethod
    def download(self, key: str) -> bytes:
        """
        Read the payload stored under key.

        Raises:
            RecordNotFoundError: If nothing is stored under key
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the payload; a missing key is not an error."""


class LocalObjectStore(ObjectStore):
    """Filesystem-backed store, one file per key."""

    def __init__(self, root_dir: Union[str, Path], bucket: str):
        self.root_dir = Path(root_dir)
        self.bucket = bucket
        self.logger = get_logger()

    @property
    def bucket_path(self) -> Path:
        return self.root_dir / self.bucket

    def _path(self, key: str) -> Path:
        return self.bucket_path / _check_key(key)

    def ensure_bucket(self) -> None:
        try:
            self.bucket_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ObjectStoreError(
                f"Failed to create bucket: {self.bucket_path}", cause=e, bucket=self.bucket
            )

    def upload(self, key: str, data: bytes) -> None:
        path = self._path(key)
        self.ensure_bucket()
        try:
            path.write_bytes(data)
        except OSError as e:
            raise ObjectStoreError("Failed to upload object", cause=e, key=key)

        self.logger.info(
            "Object uploaded", extra={"key": key, "bucket": self.bucket, "size_bytes": len(data)}
        )

    def download(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise not_found("Object", cause=e, key=key)
        except OSError as e:
            raise ObjectStoreError("Failed to download object", cause=e, key=key)

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise ObjectStoreError("Failed to delete object", cause=e, key=key)

        self.logger.info("Object deleted", extra={"key": key, "bucket": self.bucket})


class InMemoryObjectStore(ObjectStore):
    """Dictionary-backed store for tests and local experiments."""

    def __init__(self):
        self._objects: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def ensure_bucket(self) -> None:
        pass

    def upload(self, key: str, data: bytes) -> None:
        with self._lock:
            self._objects[_check_key(key)] = bytes(data)

    def download(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._objects[key]
            except KeyError as e:
                raise not_found("Object", cause=e, key=key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._objects.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._objects

    def __len__(self) -> int:
        return len(self._objects)
