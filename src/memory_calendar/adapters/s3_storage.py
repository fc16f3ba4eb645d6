"""S3 object storage access via boto3."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import ClientError

from memory_calendar.domain.media import DeleteFailure, DeleteResult, StoredObject

MAX_DELETE_BATCH = 1000

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class ObjectNotFoundError(LookupError):
    """Raised when a requested object does not exist."""


class ObjectStorage(Protocol):
    """Interface for the media bucket."""

    def list_objects(self, prefix: str | None = None) -> list[StoredObject]:
        """Return every object under a prefix, following pagination."""

    def get_object_bytes(self, key: str, byte_range: str | None = None) -> bytes:
        """Return an object's body, optionally limited to an HTTP byte range."""

    def download_file(self, key: str, destination: Path) -> None:
        """Stream an object's body to a local file."""

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        """Create or overwrite an object."""

    def object_exists(self, key: str) -> bool:
        """Return whether an object exists."""

    def delete_objects(self, keys: list[str]) -> DeleteResult:
        """Delete up to 1000 objects in a single request."""


@dataclass
class Boto3ObjectStorage(ObjectStorage):
    """ObjectStorage backed by a boto3 S3 client."""

    client: Any
    bucket: str

    @classmethod
    def create(
        cls,
        bucket: str,
        region: str,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ) -> "Boto3ObjectStorage":
        """Create storage with a dedicated S3 client."""
        client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )
        return cls(client=client, bucket=bucket)

    def list_objects(self, prefix: str | None = None) -> list[StoredObject]:
        """Return every object under a prefix, following pagination."""
        params: dict[str, Any] = {"Bucket": self.bucket}
        if prefix:
            params["Prefix"] = prefix
        objects: list[StoredObject] = []
        for page in self.client.get_paginator("list_objects_v2").paginate(**params):
            for item in page.get("Contents", []):
                key = item.get("Key")
                if not key:
                    continue
                objects.append(
                    StoredObject(
                        key=key,
                        last_modified=item.get("LastModified"),
                        etag=item.get("ETag"),
                        size=item.get("Size", 0),
                    )
                )
        return objects

    def get_object_bytes(self, key: str, byte_range: str | None = None) -> bytes:
        """Return an object's body, optionally limited to an HTTP byte range."""
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        if byte_range:
            params["Range"] = byte_range
        try:
            response = self.client.get_object(**params)
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise
        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def download_file(self, key: str, destination: Path) -> None:
        """Stream an object's body to a local file."""
        try:
            self.client.download_file(self.bucket, key, str(destination))
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        """Create or overwrite an object."""
        self.client.put_object(
            Bucket=self.bucket, Key=key, Body=body, ContentType=content_type
        )

    def object_exists(self, key: str) -> bool:
        """Return whether an object exists; non-404 errors propagate."""
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise
        return True

    def delete_objects(self, keys: list[str]) -> DeleteResult:
        """Delete up to 1000 objects in a single request."""
        batch = keys[:MAX_DELETE_BATCH]
        if not batch:
            return DeleteResult(deleted=[], errors=[])
        response = self.client.delete_objects(
            Bucket=self.bucket,
            Delete={"Objects": [{"Key": key} for key in batch], "Quiet": False},
        )
        deleted = [
            item["Key"] for item in response.get("Deleted", []) if item.get("Key")
        ]
        errors = [
            DeleteFailure(
                key=item.get("Key", ""),
                code=item.get("Code"),
                message=item.get("Message"),
            )
            for item in response.get("Errors", [])
        ]
        return DeleteResult(deleted=deleted, errors=errors)


def _is_not_found(exc: ClientError) -> bool:
    error = exc.response.get("Error", {})
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return str(error.get("Code")) in _NOT_FOUND_CODES or status == 404
