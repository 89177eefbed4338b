"""
Profile Service - saves profile edits for students and recruiters.

Only fields that differ from the stored snapshot are written. A new photo
is always uploaded first; if the upload fails nothing is written.
"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from talenttrek.core.session import Session, SessionContext
from talenttrek.schemas.schemas import Notification, NotificationLevel, ProfileUpdateResult
from talenttrek.services.aggregation import compute_profile_changes
from talenttrek.services.identity_service import IdentityService
from talenttrek.services.storage_service import ObjectStorage
from talenttrek.utils.file_upload import has_file, read_image

logger = logging.getLogger(__name__)


async def save_profile(
    session: Session,
    context: SessionContext,
    identity_service: IdentityService,
    storage: ObjectStorage,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    linkedin: Optional[str] = None,
    photo: Optional[UploadFile] = None
) -> ProfileUpdateResult:
    changes = compute_profile_changes(
        session.user.metadata,
        {"name": name, "phone": phone, "linkedin": linkedin}
    )
    new_photo = has_file(photo)

    if not changes and not new_photo:
        raise HTTPException(status_code=400, detail="No changes detected to save.")

    if new_photo:
        # UploadError propagates before any metadata write
        content, filename, content_type = await read_image(photo)
        changes["profilephoto"] = storage.upload(filename, content, content_type)

    identity_service.update_user_metadata(session.user_id, changes)
    logger.info("Updated profile fields %s for %s", sorted(changes), session.user_id)

    refreshed = context.invalidate()
    user = refreshed.user if refreshed else session.user
    return ProfileUpdateResult(
        profile=user.to_response(),
        updated_fields=sorted(changes),
        notification=Notification(
            level=NotificationLevel.success,
            message="Your profile has been successfully updated."
        )
    )
