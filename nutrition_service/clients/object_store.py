"""
Object Store Gateway

Uploads product images to an S3 compatible bucket and deletes them again.
boto3 is blocking, so every call runs in a worker thread under the external
call policy.
"""

import asyncio
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from nutrition_service.core.config import Config
from nutrition_service.core.errors import UpstreamError
from nutrition_service.core.logger import logger
from nutrition_service.core.resilience import CallPolicy

SERVICE = "object_store"


class ObjectStoreGateway:
    """Gateway to the image bucket returning public URLs"""

    def __init__(
        self,
        client,
        bucket: str,
        region: str = "us-east-1",
        public_base_url: Optional[str] = None,
        acl: Optional[str] = None,
        policy: CallPolicy = CallPolicy(),
    ):
        self.client = client
        self.bucket = bucket
        self.region = region
        self.public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self.acl = acl
        self.policy = policy

    @classmethod
    def from_config(cls, config: Config) -> "ObjectStoreGateway":
        client_kwargs = {"region_name": config.s3_region}
        if config.s3_endpoint_url:
            client_kwargs["endpoint_url"] = config.s3_endpoint_url
        if config.aws_access_key_id and config.aws_secret_access_key:
            client_kwargs.update(
                aws_access_key_id=config.aws_access_key_id,
                aws_secret_access_key=config.aws_secret_access_key,
            )
        return cls(
            client=boto3.client("s3", **client_kwargs),
            bucket=config.s3_bucket,
            region=config.s3_region,
            public_base_url=config.s3_public_base_url,
            acl=config.s3_object_acl,
            policy=CallPolicy.from_config(config),
        )

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url_or_key: str) -> str:
        """Accept a public URL produced by this gateway or a bare key"""
        prefix = f"{self.public_base_url}/"
        if url_or_key.startswith(prefix):
            return unquote(url_or_key[len(prefix):])
        parsed = urlparse(url_or_key)
        if parsed.scheme in ("http", "https"):
            return unquote(parsed.path.lstrip("/"))
        return url_or_key

    async def upload(self, local_path: Path, key: str, content_type: str) -> str:
        """Upload a local file under `key` and return its public URL"""
        if not self.bucket:
            raise UpstreamError(SERVICE, detail="S3_BUCKET is not configured")

        extra_args = {"ContentType": content_type}
        if self.acl:
            extra_args["ACL"] = self.acl

        try:
            await self.policy.run(
                "object_store.upload",
                lambda: asyncio.to_thread(
                    self.client.upload_file, str(local_path), self.bucket, key,
                    ExtraArgs=extra_args,
                ),
                retry_on=(EndpointConnectionError,),
            )
        except (BotoCoreError, ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(SERVICE, detail=f"upload {key}: {type(e).__name__}: {e}") from e

        url = self.public_url(key)
        logger.info(
            f"Uploaded image {key}",
            metadata={"event": "image_uploaded", "bucket": self.bucket, "key": key},
        )
        return url

    async def delete(self, url_or_key: str) -> None:
        """Delete an object; a key that does not exist is not an error"""
        if not self.bucket:
            raise UpstreamError(SERVICE, detail="S3_BUCKET is not configured")

        key = self.key_from_url(url_or_key)
        try:
            await self.policy.run(
                "object_store.delete",
                lambda: asyncio.to_thread(
                    self.client.delete_object, Bucket=self.bucket, Key=key
                ),
                retry_on=(EndpointConnectionError,),
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                logger.warning(
                    f"Image {key} was already missing from the bucket",
                    metadata={"event": "image_missing", "bucket": self.bucket, "key": key},
                )
                return
            raise UpstreamError(SERVICE, detail=f"delete {key}: {e}") from e
        except (BotoCoreError, asyncio.TimeoutError) as e:
            raise UpstreamError(SERVICE, detail=f"delete {key}: {type(e).__name__}: {e}") from e

        logger.info(
            f"Deleted image {key}",
            metadata={"event": "image_deleted", "bucket": self.bucket, "key": key},
        )
