"""
File Upload Utility - validate uploaded files before they reach storage.

Resumes: .pdf, .doc, .docx
Profile photos: any image/* content type

Max file size: 5MB each (configurable)
"""

from typing import Tuple
from fastapi import UploadFile

from talenttrek.core.config import get_settings
from talenttrek.core.errors import UploadError

settings = get_settings()

RESUME_EXTENSIONS = {'.pdf', '.doc', '.docx'}
RESUME_CONTENT_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def has_file(file) -> bool:
    """Browsers post an empty part for an untouched file input."""
    return file is not None and bool(getattr(file, "filename", ""))


async def read_resume(file: UploadFile) -> Tuple[bytes, str, str]:
    """
    Read and validate a resume upload.

    Returns:
        Tuple of (content, filename, content_type)

    Raises:
        UploadError on validation errors
    """
    if not file.filename:
        raise UploadError("No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in RESUME_EXTENSIONS:
        raise UploadError(f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX")

    content = await file.read()
    _check_size(content, settings.max_resume_size_mb, "Resume")
    if not content:
        raise UploadError("Resume file is empty")

    return content, file.filename, RESUME_CONTENT_TYPES[ext]


async def read_image(file: UploadFile) -> Tuple[bytes, str, str]:
    """Read and validate a profile photo upload."""
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise UploadError("Please upload an image file")

    content = await file.read()
    _check_size(content, settings.max_photo_size_mb, "Profile image")
    if not content:
        raise UploadError("Image file is empty")

    return content, file.filename or "profile-photo", content_type


def _check_size(content: bytes, limit_mb: int, label: str) -> None:
    if len(content) > limit_mb * 1024 * 1024:
        raise UploadError(f"{label} must be less than {limit_mb}MB")
