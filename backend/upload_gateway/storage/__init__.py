"""
Storage module for S3-compatible object storage.

The gateway receives file bytes and relays them to the bucket in one put.
"""
from upload_gateway.storage.s3_client import (
    PUBLIC_READ_ACL,
    PutOutcome,
    S3Relay,
    build_s3_client,
)

__all__ = ["PUBLIC_READ_ACL", "PutOutcome", "S3Relay", "build_s3_client"]
