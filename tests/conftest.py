"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
from botocore.stub import Stubber
from httpx import AsyncClient, ASGITransport

from upload_manager.config import Settings, get_storage_client
from upload_manager.core.dependencies import get_storage_service
from upload_manager.main import app
from upload_manager.services.storage_service import StorageService
from tests.fakes import CLIENT_MAX_SIZE, FakeClock, FakeS3Client


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at a fake endpoint."""
    return Settings(
        S3_REGION="us-east-1",
        S3_ACCESS_KEY="test-access-key",
        S3_SECRET_KEY="test-secret-key",
        S3_ENDPOINT="https://s3.test.com",
        S3_BUCKET="test-bucket",
        S3_MAX_FILE_SIZE=CLIENT_MAX_SIZE,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def s3_client(test_settings):
    """Real boto3 client; signing is local so presigned URLs are genuine."""
    return get_storage_client(test_settings)


@pytest.fixture
def stubber(s3_client):
    """botocore Stubber active on the real client."""
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def storage_service(test_settings, s3_client, clock) -> StorageService:
    """Storage service on the stubbed real client."""
    return StorageService(config=test_settings, client=s3_client, clock=clock)


@pytest.fixture
def fake_storage_service(test_settings, fake_client, clock) -> StorageService:
    """Storage service on the fake client."""
    return StorageService(config=test_settings, client=fake_client, clock=clock)


@pytest.fixture
async def client(fake_storage_service) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    app.dependency_overrides[get_storage_service] = lambda: fake_storage_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
