"""
Upload relay service.

Handles the business logic between the HTTP layer and object storage:

1. Parse the multipart form
2. Pick the "file" part and validate it
3. Open the part as a readable stream
4. Relay the stream to storage in one blocking put (threadpool)
5. Map the outcome to success or a request error

Closing the form is the caller's job (see api/uploads.py), so every
uploaded stream is released on every exit path.
"""
import logging
import time
from typing import BinaryIO

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect, Request

from upload_gateway.context import AppContext
from upload_gateway.errors import BackendError, ClientInputError, LocalIOError
from upload_gateway.utils.logging import (
    log_upload_completed,
    log_upload_failed,
    log_upload_rejected,
)
from upload_gateway.utils.metrics import uploads_total

logger = logging.getLogger(__name__)

FILE_FIELD = "file"


class UploadService:
    """
    Service for relaying a single uploaded file to storage.

    Stateless: all shared state comes from the AppContext argument.
    """

    @staticmethod
    async def read_form(request: Request) -> FormData:
        """
        Parse the request body as a form.

        Raises:
            ClientInputError: If the body is not a parsable multipart form,
                or the client went away before sending all of it
        """
        try:
            return await request.form()
        except MultiPartException as e:
            raise UploadService._reject(f"Could not read uploaded file: {e.message}")
        except HTTPException as e:
            # Starlette wraps multipart errors when running inside an app
            raise UploadService._reject(f"Could not read uploaded file: {e.detail}")
        except ClientDisconnect:
            raise UploadService._reject("Could not read uploaded file: client disconnected")

    @staticmethod
    def extract_upload(form: FormData) -> UploadFile:
        """
        Get the file part from the parsed form.

        The first "file" part wins if the client sent several.

        Raises:
            ClientInputError: If the part is missing, is a plain value,
                or carries no filename
        """
        parts = form.getlist(FILE_FIELD)
        if not parts:
            raise UploadService._reject(
                f"Could not read uploaded file: no '{FILE_FIELD}' field in form"
            )

        upload = parts[0]
        if not isinstance(upload, UploadFile):
            raise UploadService._reject(
                f"Could not read uploaded file: '{FILE_FIELD}' field is not a file"
            )
        if not upload.filename:
            raise UploadService._reject(
                "Could not read uploaded file: missing filename"
            )
        return upload

    @staticmethod
    def open_stream(upload: UploadFile) -> BinaryIO:
        """
        Open the uploaded part as a stream positioned at its first byte.

        Raises:
            LocalIOError: If the part has no usable stream
        """
        stream = upload.file
        if stream is None or stream.closed:
            UploadService._count_open_failure(upload.filename, "stream is closed")
            raise LocalIOError("Could not open uploaded file: stream is closed")

        try:
            stream.seek(0)
        except (OSError, ValueError) as e:
            UploadService._count_open_failure(upload.filename, str(e))
            raise LocalIOError(f"Could not open uploaded file: {e}") from e
        return stream

    @staticmethod
    async def relay_upload(context: AppContext, form: FormData) -> str:
        """
        Relay the form's file part to storage.

        Args:
            context: Application context with the shared relay
            form: Parsed form; not closed here

        Returns:
            The object key that was written (the filename, verbatim)

        Raises:
            ClientInputError: The file part is missing or invalid
            LocalIOError: The part cannot be opened
            BackendError: Storage rejected or failed the write
        """
        upload = UploadService.extract_upload(form)
        stream = UploadService.open_stream(upload)
        key = upload.filename
        bucket = context.relay.bucket

        start = time.time()
        outcome = await run_in_threadpool(
            context.relay.put, key, stream, upload.content_type
        )
        duration_ms = (time.time() - start) * 1000

        if not outcome.ok:
            uploads_total.labels(outcome="backend_failed").inc()
            log_upload_failed(
                logger, filename=key, bucket=bucket,
                error=outcome.error, duration_ms=duration_ms
            )
            raise BackendError(f"Failed to upload file to S3: {outcome.error}")

        uploads_total.labels(outcome="stored").inc()
        log_upload_completed(logger, filename=key, bucket=bucket, duration_ms=duration_ms)
        return key

    @staticmethod
    def _reject(message: str) -> ClientInputError:
        uploads_total.labels(outcome="rejected").inc()
        log_upload_rejected(logger, reason=message)
        return ClientInputError(message)

    @staticmethod
    def _count_open_failure(filename: str, error: str) -> None:
        uploads_total.labels(outcome="open_failed").inc()
        log_upload_rejected(logger, reason="open_failed", filename=filename, error=error)
