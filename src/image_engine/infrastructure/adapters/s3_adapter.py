"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3

from image_engine.infrastructure.config import ObjectStoreConfig


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
        Metadata: Mapping[str, str],
    ) -> Any: ...

    def get_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
        **kwargs: Any,
    ) -> Any: ...

    def head_bucket(self, *, Bucket: str) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (driver-facing)."""

    @property
    def bucket(self) -> str: ...

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str, if_match: str | None = None) -> None: ...

    def head_bucket(self) -> None: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, config: ObjectStoreConfig) -> None:
        """Create S3 client for the configured bucket and endpoint."""
        self._bucket = config.collection_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=config.connection_target,
            region_name=config.region_name,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Store object in S3, replacing any object under the same key.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.get_object(
            Bucket=self._bucket,
            Key=key,
        )
        return response

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object headers without the body.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=self._bucket,
            Key=key,
        )

    def delete_object(self, *, key: str, if_match: str | None = None) -> None:
        """Delete object from S3, only if its ETag matches `if_match` when given.
        Raises boto3 exceptions - caught by domain implementation.
        """
        conditions = {"IfMatch": if_match} if if_match else {}
        self._client.delete_object(
            Bucket=self._bucket,
            Key=key,
            **conditions,
        )

    def head_bucket(self) -> None:
        """Check that the bucket exists and is accessible.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.head_bucket(Bucket=self._bucket)
