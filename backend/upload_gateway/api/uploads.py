"""
Upload endpoint.

POST /upload takes a multipart form with a "file" part, relays it to the
bucket and redirects back to the landing page.

Responses:
- 303 to "/" once storage acknowledged the write
- 400 when the file part is missing or unreadable
- 500 when the part cannot be opened or storage fails

Error bodies are plain text (see errors.py and main.create_app()).
"""
from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from upload_gateway.context import ContextDep
from upload_gateway.services.upload_service import UploadService

router = APIRouter()


@router.post("/upload")
async def upload_file(request: Request, context: ContextDep):
    """
    Relay the uploaded file to storage.

    The form, and with it the uploaded stream, is closed before the
    response is returned, whatever happens during the relay.
    """
    form = await UploadService.read_form(request)
    try:
        await UploadService.relay_upload(context, form)
    finally:
        await form.close()

    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
