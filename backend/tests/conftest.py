"""
Test configuration and fixtures.
Uses an in-memory fake S3 client; no network or AWS account is needed.
"""
import os

# Set test environment before any imports
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_BUCKET_NAME"] = "baby-photos"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("AWS_ACCESS_KEY_ID", None)
os.environ.pop("AWS_SECRET_ACCESS_KEY", None)
os.environ.pop("PORT", None)

import pytest
from typing import AsyncGenerator

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from upload_gateway.config import Settings, load_settings
from upload_gateway.context import AppContext
from upload_gateway.main import create_app
from upload_gateway.storage.s3_client import S3Relay

from tests.fakes import FakeS3Client


@pytest.fixture
def settings() -> Settings:
    """Validated settings for a test bucket."""
    return load_settings(
        aws_region="us-east-1",
        aws_bucket_name="baby-photos",
        _env_file=None,
    )


@pytest.fixture
def fake_s3() -> FakeS3Client:
    """A fake S3 client that accepts every put."""
    return FakeS3Client()


@pytest.fixture
def context(settings: Settings, fake_s3: FakeS3Client) -> AppContext:
    """Application context wired to the fake S3 client."""
    return AppContext(settings=settings, relay=S3Relay(fake_s3, settings.aws_bucket_name))


@pytest.fixture
def app(context: AppContext) -> FastAPI:
    """FastAPI app built around the test context."""
    return create_app(context)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
