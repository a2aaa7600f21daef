"""
Application context shared by all requests.

Built once at startup, attached to app.state and resolved per request via
FastAPI dependencies. Nothing in it is mutated after construction.
"""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from upload_gateway.config import Settings
from upload_gateway.storage.s3_client import S3Relay


@dataclass(frozen=True)
class AppContext:
    """Read-only settings plus the shared storage relay."""

    settings: Settings
    relay: S3Relay


def build_context(settings: Settings) -> AppContext:
    """Create the storage client and wrap it with the settings."""
    return AppContext(settings=settings, relay=S3Relay.from_settings(settings))


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context attached in create_app()."""
    try:
        return request.app.state.context
    except AttributeError as exc:
        raise RuntimeError("AppContext not initialized on app.state") from exc


ContextDep = Annotated[AppContext, Depends(get_context)]
