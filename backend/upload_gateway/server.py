"""
Process bootstrap.

Loads settings, binds the listen socket and serves the app with uvicorn.

Port binding tries exactly two candidates: the configured port (PORT,
default 8080) and then the fixed fallback 8081. Only "address already in
use" moves on to the fallback; any other socket error is fatal.
"""
import errno
import logging
import os
import socket
import sys
from typing import List, Sequence

import uvicorn

from upload_gateway.config import Settings, load_settings
from upload_gateway.context import build_context
from upload_gateway.errors import BindConflictError, StartupConfigurationError
from upload_gateway.main import create_app
from upload_gateway.utils.logging import (
    configure_logging,
    log_port_fallback,
    log_server_starting,
    set_log_level,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "upload-gateway"
FALLBACK_PORT = 8081
LISTEN_BACKLOG = 2048


def candidate_ports(configured_port: int) -> List[int]:
    """Ports to try, in order. The fallback does not depend on the configured port."""
    return [configured_port, FALLBACK_PORT]


def bind_listen_socket(host: str, ports: Sequence[int]) -> socket.socket:
    """
    Bind and listen on the first candidate port that is free.

    Args:
        host: Interface to bind
        ports: Candidate ports, tried in order

    Returns:
        A listening socket

    Raises:
        BindConflictError: If every candidate is already in use
        OSError: On any other bind failure
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET

    for index, port in enumerate(ports):
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
            sock.listen(LISTEN_BACKLOG)
        except OSError as e:
            sock.close()
            if e.errno != errno.EADDRINUSE:
                raise
            if index + 1 < len(ports):
                log_port_fallback(logger, port=port, fallback_port=ports[index + 1])
            continue
        return sock

    raise BindConflictError(ports)


def serve(settings: Settings) -> None:
    """Build the app, bind a port and block serving requests."""
    app = create_app(build_context(settings))

    sock = bind_listen_socket(settings.host, candidate_ports(settings.port))
    bound_port = sock.getsockname()[1]
    log_server_starting(logger, host=settings.host, port=bound_port)

    config = uvicorn.Config(
        app,
        log_config=None,  # keep the JSON root handler
        log_level=settings.log_level.lower(),
        access_log=True,
    )
    server = uvicorn.Server(config)
    server.run(sockets=[sock])


def main() -> int:
    """Console entry point. Returns the process exit status."""
    # Provisional level until settings (including .env) are loaded
    configure_logging(SERVICE_NAME, os.getenv("LOG_LEVEL", "INFO"))

    try:
        settings = load_settings()
        set_log_level(settings.log_level)
        serve(settings)
    except StartupConfigurationError as e:
        logger.critical(f"Refusing to start: {e}")
        return 1
    except BindConflictError as e:
        logger.critical(f"Could not bind a listen port: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
