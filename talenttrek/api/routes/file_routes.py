"""
File Routes

GET /files/{file_id} - Stream a stored resume or profile photo
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from talenttrek.services.storage_service import ObjectStorage, get_object_storage

router = APIRouter(tags=["Files"])


def content_disposition(filename: str) -> str:
    """
    inline disposition safe for any upload name.

    Header values must be latin-1, so the real name goes in the RFC 5987
    `filename*` parameter and `filename` gets an ASCII-only fallback.
    """
    fallback = "".join(
        ch if 32 <= ord(ch) < 127 and ch not in '"\\' else "_" for ch in filename
    ) or "download"
    return f"inline; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("/files/{file_id}")
async def download_file(file_id: str, storage: ObjectStorage = Depends(get_object_storage)):
    """Public URL target for uploaded files."""
    stored = storage.open(file_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="File not found")

    chunks, filename, content_type = stored
    return StreamingResponse(
        chunks,
        media_type=content_type,
        headers={"Content-Disposition": content_disposition(filename or "download")}
    )
