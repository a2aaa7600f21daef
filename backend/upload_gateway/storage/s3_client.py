"""
S3 / S3-compatible storage relay.

Uses boto3 to write uploaded files straight into the configured bucket.
Works with AWS S3 and any S3-compatible store reachable via AWS_ENDPOINT_URL.

Every object is written with the public-read ACL, and the object key is the
client-supplied filename, used verbatim. Uploading the same filename twice
overwrites the first object.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_gateway.config import Settings
from upload_gateway.utils.metrics import storage_put_duration_seconds

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "public-read"


@dataclass(frozen=True)
class PutOutcome:
    """Result of a single relay attempt."""

    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "PutOutcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "PutOutcome":
        return cls(ok=False, error=error)


def build_s3_client(settings: Settings) -> Any:
    """
    Create the boto3 S3 client shared by all requests.

    Static credentials are passed only when both keys are configured;
    otherwise boto3 resolves credentials from its default chain
    (environment, shared config, instance profile, ...).

    Retries are disabled: a failed put is reported to the caller as-is.
    """
    kwargs = {
        "region_name": settings.aws_region,
        "config": Config(retries={"max_attempts": 1, "mode": "standard"}),
    }
    if settings.aws_endpoint_url:
        kwargs["endpoint_url"] = settings.aws_endpoint_url
    if settings.has_static_credentials:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key

    return boto3.client("s3", **kwargs)


class S3Relay:
    """
    Relays upload streams to a single S3 bucket.

    Holds no per-request state; one instance is shared by all requests.
    """

    def __init__(self, client: Any, bucket: str):
        """
        Args:
            client: boto3 S3 client (or anything exposing put_object)
            bucket: Target bucket name
        """
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3Relay":
        relay = cls(build_s3_client(settings), settings.aws_bucket_name)
        logger.info(f"S3 relay initialized for bucket: {settings.aws_bucket_name}")
        return relay

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._bucket

    def put(
        self,
        key: str,
        stream: BinaryIO,
        content_type: Optional[str] = None,
    ) -> PutOutcome:
        """
        Write the stream to the bucket under the given key.

        The stream is read to completion by boto3. A single attempt is made.

        Args:
            key: Object key, used verbatim
            stream: Readable binary stream with the object body
            content_type: Optional MIME type recorded on the object

        Returns:
            PutOutcome.success() once the backend acknowledges the write,
            otherwise a failed PutOutcome with the backend's error text
        """
        params = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": stream,
            "ACL": PUBLIC_READ_ACL,
        }
        if content_type:
            params["ContentType"] = content_type

        start = time.time()
        try:
            self._client.put_object(**params)
        except ClientError as e:
            logger.error(f"S3 rejected upload of {key}: {e}")
            return PutOutcome.failure(str(e))
        except BotoCoreError as e:
            logger.error(f"S3 request for {key} failed: {e}")
            return PutOutcome.failure(str(e))
        except (OSError, ValueError) as e:
            # Reading the upload body failed, e.g. the client went away
            # or the stream was already closed
            logger.error(f"Reading upload body for {key} failed: {e}")
            return PutOutcome.failure(str(e))
        finally:
            storage_put_duration_seconds.observe(time.time() - start)

        logger.debug(f"Stored {key} in bucket {self._bucket}")
        return PutOutcome.success()
