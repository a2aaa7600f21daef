"""
Landing page with the upload form.
"""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

INDEX_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Baby Photos</title>
</head>
<body>
    <h1>Welcome to Baby Photos!</h1>
    <form method="POST" action="/upload" enctype="multipart/form-data">
        <input type="file" name="file" accept="image/*" required>
        <button type="submit">Upload Photo</button>
    </form>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def index():
    """Serve the upload form."""
    return HTMLResponse(INDEX_HTML)
