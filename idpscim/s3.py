"""State repository that keeps the state as a JSON object in an S3 bucket."""

from __future__ import annotations

import json
from typing import Any, Protocol

from idpscim.models import State


class S3RepositoryError(Exception):
    """Raised when the S3 repository cannot load or store the state."""


class S3ClientNilError(S3RepositoryError):
    """Raised when no S3 client is given."""

    def __init__(self, message: str = "s3: AWS S3 Client is nil") -> None:
        super().__init__(message)


class BucketMissingError(S3RepositoryError):
    """Raised when no bucket name is given."""

    def __init__(self, message: str = "s3: option WithBucket is nil") -> None:
        super().__init__(message)


class KeyMissingError(S3RepositoryError):
    """Raised when no object key is given."""

    def __init__(self, message: str = "s3: option WithKey is nil") -> None:
        super().__init__(message)


class StateNilError(S3RepositoryError):
    """Raised when asked to store no state."""

    def __init__(self, message: str = "s3: state is nil") -> None:
        super().__init__(message)


class S3Client(Protocol):
    """The part of an S3 client the repository uses."""

    def get_object(self, *, Bucket: str, Key: str) -> Any: ...

    def put_object(self, *, Bucket: str, Key: str, Body: bytes) -> Any: ...


class S3Repository:
    """Loads and stores the synchronization state in one S3 object."""

    def __init__(self, client: S3Client | None, *, bucket: str = "", key: str = "") -> None:
        if client is None:
            raise S3ClientNilError()
        if not bucket:
            raise BucketMissingError()
        if not key:
            raise KeyMissingError()
        self._client = client
        self.bucket = bucket
        self.key = key

    def get_state(self) -> State:
        """Fetch the object and decode it as a state."""
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=self.key)
        except Exception as exc:
            raise S3RepositoryError(
                f"s3: error getting S3 object: bucket: {self.bucket}, error: {exc}"
            ) from exc

        body = response["Body"]
        try:
            data = body.read() if hasattr(body, "read") else body
        finally:
            close = getattr(body, "close", None)
            if callable(close):
                close()

        try:
            if isinstance(data, (bytes, bytearray)):
                data = bytes(data).decode("utf-8")
            return State.from_dict(json.loads(data))
        except (ValueError, TypeError) as exc:
            raise S3RepositoryError(f"s3: error decoding S3 object: {exc}") from exc

    def set_state(self, state: State | None) -> None:
        """Encode the state as indented JSON and store it as the object."""
        if state is None:
            raise StateNilError()

        try:
            payload = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise S3RepositoryError(f"s3: error marshaling state: {exc}") from exc

        try:
            self._client.put_object(
                Bucket=self.bucket, Key=self.key, Body=payload.encode("utf-8")
            )
        except Exception as exc:
            raise S3RepositoryError(f"s3: error putting S3 object: {exc}") from exc