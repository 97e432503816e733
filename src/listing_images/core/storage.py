"""S3-backed object storage for uploaded listing images."""

from contextlib import AsyncExitStack
from typing import Any, Optional
from urllib.parse import quote

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import StorageError
from .logging_config import get_logger
from .models import UploaderConfig


class S3ImageStorage:
    """
    Async storage collaborator backed by a single shared aioboto3 S3 client.

    Use as an async context manager; the client is opened on entry and closed
    on exit:

        async with S3ImageStorage("images") as storage:
            await storage.put("42/1700000000000.jpg", data, "image/jpeg")
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url
        self._session = session or aioboto3.Session()
        self._exit_stack: Optional[AsyncExitStack] = None
        self._client: Any = None
        self._logger = get_logger("listing-images.storage")

    @classmethod
    def from_config(
        cls, config: UploaderConfig, session: Optional[aioboto3.Session] = None
    ) -> "S3ImageStorage":
        return cls(
            bucket=config.bucket,
            region=config.region,
            endpoint_url=config.endpoint_url,
            public_base_url=config.public_base_url,
            session=session,
        )

    async def __aenter__(self) -> "S3ImageStorage":
        stack = AsyncExitStack()
        try:
            self._client = await stack.enter_async_context(
                self._session.client(  # type: ignore[reportUnknownMemberType]
                    "s3", region_name=self.region, endpoint_url=self.endpoint_url
                )
            )
        except (ClientError, BotoCoreError) as exc:
            await stack.aclose()
            raise StorageError(f"Could not open S3 client: {exc}") from exc
        self._exit_stack = stack
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        stack, self._exit_stack = self._exit_stack, None
        self._client = None
        if stack is not None:
            await stack.aclose()

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        """Upload one object to ``s3://{bucket}/{path}``."""
        if self._client is None:
            raise StorageError("S3 client is not open; use 'async with' on the storage")

        self._logger.debug(f"Uploading s3://{self.bucket}/{path} ({len(data)} bytes)")
        try:
            await self._client.put_object(
                Bucket=self.bucket, Key=path, Body=data, ContentType=content_type
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "Unknown")
            raise StorageError(f"Upload of {path} failed ({code}): {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Upload of {path} failed: {exc}") from exc

    def get_public_url(self, path: str) -> str:
        """Public URL of an object in the bucket."""
        key = quote(path.lstrip("/"))
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
