"""
Business logic services.
"""
from upload_gateway.services.upload_service import UploadService

__all__ = [
    "UploadService",
]
