"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- filename
- bucket
- port
- duration_ms
- error

Usage:
    from upload_gateway.utils.logging import configure_logging, log_upload_completed

    configure_logging('upload-gateway', 'INFO')
    log_upload_completed(logger, filename='photo1.jpg', bucket='photos', duration_ms=45.2)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (container logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    filename: Optional[str] = None,
    bucket: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        filename: Optional uploaded filename
        bucket: Optional target bucket
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    # "filename" is a reserved LogRecord attribute, hence the prefix
    if filename is not None:
        extra["upload_filename"] = filename
    if bucket:
        extra["bucket"] = bucket
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_upload_completed(
    logger: logging.Logger,
    filename: str,
    bucket: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a successful relay to storage."""
    extra = _build_log_extra(
        event="upload_completed",
        filename=filename,
        bucket=bucket,
        duration_ms=duration_ms,
        **kwargs
    )
    logger.info(f"Upload stored: {filename}", extra=extra)


def log_upload_rejected(
    logger: logging.Logger,
    reason: str,
    filename: Optional[str] = None,
    **kwargs
):
    """
    Log an upload that never reached storage.

    Args:
        logger: Logger instance
        reason: Why the upload was rejected (required)
        filename: Filename, when one could be read
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_rejected",
        filename=filename,
        reason=reason,
        **kwargs
    )
    logger.warning(f"Upload rejected: {reason}", extra=extra)


def log_upload_failed(
    logger: logging.Logger,
    filename: str,
    bucket: str,
    error: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a storage failure for an upload.

    Stack traces are not included; the backend error text is enough.
    """
    extra = _build_log_extra(
        event="upload_failed",
        filename=filename,
        bucket=bucket,
        duration_ms=duration_ms,
        error=str(error),
        **kwargs
    )
    logger.error(f"Upload failed: {filename} - {error}", extra=extra)


# Server event functions

def log_server_starting(
    logger: logging.Logger,
    host: str,
    port: int,
    **kwargs
):
    """Log the address the server is about to serve on."""
    extra = _build_log_extra(event="server_starting", host=host, port=port, **kwargs)
    logger.info(f"Serving on {host}:{port}", extra=extra)


def log_port_fallback(
    logger: logging.Logger,
    port: int,
    fallback_port: int,
    **kwargs
):
    """Log that the configured port was taken and the fallback is tried."""
    extra = _build_log_extra(
        event="port_fallback",
        port=port,
        fallback_port=fallback_port,
        **kwargs
    )
    logger.warning(
        f"Port {port} is already in use, switching to port {fallback_port}",
        extra=extra
    )


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)


def set_log_level(log_level: str):
    """Change the root level after logging has been configured."""
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.INFO))
