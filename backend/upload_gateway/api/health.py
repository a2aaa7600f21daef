"""
Health check endpoint.
"""
from fastapi import APIRouter

from upload_gateway.context import ContextDep

router = APIRouter()


@router.get("")
async def health_check(context: ContextDep):
    """
    Liveness check.

    Does not touch the storage backend; reports the bucket and region the
    process was configured with.
    """
    settings = context.settings
    return {
        "status": "healthy",
        "bucket": settings.aws_bucket_name,
        "region": settings.aws_region,
    }
