"""Tests for the S3 object store gateway"""
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from nutrition_service.clients.object_store import ObjectStoreGateway
from nutrition_service.core.errors import UpstreamError
from nutrition_service.core.resilience import CallPolicy


def client_error(code: str, operation: str = "DeleteObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def gateway(s3_client):
    return ObjectStoreGateway(
        s3_client,
        bucket="test-bucket",
        region="eu-west-1",
        acl="public-read",
        policy=CallPolicy(timeout=1.0, retries=1, wait=0),
    )


class TestObjectStoreUrls:

    def test_public_url(self, gateway):
        assert gateway.public_url("1-a.png") == "https://test-bucket.s3.eu-west-1.amazonaws.com/1-a.png"

    def test_custom_public_base_url(self, s3_client):
        gateway = ObjectStoreGateway(s3_client, "b", public_base_url="http://localhost:9000/b/")
        assert gateway.public_url("k.png") == "http://localhost:9000/b/k.png"
        assert gateway.key_from_url("http://localhost:9000/b/k.png") == "k.png"

    def test_key_from_url(self, gateway):
        assert gateway.key_from_url("https://test-bucket.s3.eu-west-1.amazonaws.com/1-a%20b.png") == "1-a b.png"
        assert gateway.key_from_url("1-a.png") == "1-a.png"


class TestObjectStoreUpload:

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self, gateway, s3_client):
        url = await gateway.upload(Path("/tmp/1-a.png"), "1-a.png", "image/png")

        assert url == "https://test-bucket.s3.eu-west-1.amazonaws.com/1-a.png"
        s3_client.upload_file.assert_called_once_with(
            "/tmp/1-a.png", "test-bucket", "1-a.png",
            ExtraArgs={"ContentType": "image/png", "ACL": "public-read"},
        )

    @pytest.mark.asyncio
    async def test_upload_failure(self, gateway, s3_client):
        s3_client.upload_file.side_effect = client_error("AccessDenied", "PutObject")

        with pytest.raises(UpstreamError) as exc_info:
            await gateway.upload(Path("/tmp/1-a.png"), "1-a.png", "image/png")
        assert "AccessDenied" in exc_info.value.detail
        assert s3_client.upload_file.call_count == 1

    @pytest.mark.asyncio
    async def test_upload_retries_connection_error(self, gateway, s3_client):
        s3_client.upload_file.side_effect = [
            EndpointConnectionError(endpoint_url="https://s3"),
            None,
        ]

        await gateway.upload(Path("/tmp/1-a.png"), "1-a.png", "image/png")

        assert s3_client.upload_file.call_count == 2

    @pytest.mark.asyncio
    async def test_upload_without_bucket(self, s3_client):
        gateway = ObjectStoreGateway(s3_client, bucket=None)

        with pytest.raises(UpstreamError):
            await gateway.upload(Path("/tmp/a.png"), "a.png", "image/png")
        s3_client.upload_file.assert_not_called()


class TestObjectStoreDelete:

    @pytest.mark.asyncio
    async def test_delete_by_url(self, gateway, s3_client):
        await gateway.delete("https://test-bucket.s3.eu-west-1.amazonaws.com/1-a.png")

        s3_client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="1-a.png")

    @pytest.mark.asyncio
    async def test_delete_missing_object_is_ignored(self, gateway, s3_client):
        s3_client.delete_object.side_effect = client_error("NoSuchKey")

        await gateway.delete("1-a.png")

    @pytest.mark.asyncio
    async def test_delete_failure(self, gateway, s3_client):
        s3_client.delete_object.side_effect = client_error("AccessDenied")

        with pytest.raises(UpstreamError):
            await gateway.delete("1-a.png")
