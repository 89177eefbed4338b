"""
Identity Service - accounts, credentials and profile metadata.

Stands in for the hosted auth provider: every account row carries an
email, a bcrypt hash and a free-form metadata bag (name, phone, linkedin,
profilephoto, resume, role). The role is validated on the way in and on
the way out; nothing downstream trusts the raw string.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from talenttrek.core.auth import hash_password, verify_password
from talenttrek.core.errors import AuthError, DataFetchError, MutationError
from talenttrek.db.postgres import execute_raw_sql, get_db_session
from talenttrek.schemas.schemas import Applicant, Role, UserMetadata, UserResponse

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "linkedin", "profilephoto")


@dataclass
class Identity:
    id: str
    email: str
    metadata: UserMetadata = field(default_factory=UserMetadata)
    created_at: Optional[datetime] = None

    @property
    def role(self) -> Optional[Role]:
        return Role.parse(self.metadata.role)

    def to_response(self) -> UserResponse:
        return UserResponse(
            id=self.id,
            email=self.email,
            name=self.metadata.name or "",
            phone=self.metadata.phone or "",
            linkedin=self.metadata.linkedin or "",
            profilephoto=self.metadata.profilephoto or "",
            resume=self.metadata.resume,
            role=self.role,
        )

    def to_applicant(self) -> Applicant:
        meta = self.metadata
        return Applicant(
            id=self.id,
            email=self.email or "N/A",
            name=meta.name or "Unknown User",
            role=meta.role or "user",
            phone=meta.phone or "N/A",
            linkedin=meta.linkedin or "#",
            profilephoto=meta.profilephoto or "",
        )


def _row_to_identity(row: dict) -> Identity:
    raw = row.get("user_metadata") or "{}"
    try:
        data = json.loads(raw) if isinstance(raw, str) else dict(raw)
    except (TypeError, ValueError):
        logger.warning("Unreadable metadata for user %s", row.get("id"))
        data = {}
    return Identity(
        id=row["id"],
        email=row["email"],
        metadata=UserMetadata(**data),
        created_at=row.get("created_at"),
    )


class IdentityService:
    """
    Account operations used by the sign-in/sign-up pages, the session
    context and the recruiter pages (applicant lookup).
    """

    def sign_up(self, email: str, password: str, metadata: dict) -> Identity:
        role = Role.parse(metadata.get("role"))
        if role is None:
            raise AuthError("Please choose a valid role")
        metadata = {**metadata, "role": role.value}
        email = email.strip().lower()

        user_id = str(uuid.uuid4())
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("SELECT id FROM users WHERE email = :email"),
                    {"email": email}
                )
                if result.fetchone():
                    raise AuthError("User already registered")

                db.execute(
                    text("""
                        INSERT INTO users (id, email, password_hash, user_metadata, created_at)
                        VALUES (:id, :email, :password_hash, :metadata, :created_at)
                    """),
                    {
                        "id": user_id,
                        "email": email,
                        "password_hash": hash_password(password),
                        "metadata": json.dumps(metadata),
                        "created_at": datetime.now(timezone.utc).isoformat()
                    }
                )
        except IntegrityError:
            raise AuthError("User already registered")
        except SQLAlchemyError as e:
            logger.exception("Account creation failed for %s", email)
            raise AuthError("Could not create account. Please try again.") from e

        logger.info("Registered %s as %s", email, role.value)
        return Identity(id=user_id, email=email, metadata=UserMetadata(**metadata))

    def sign_in(self, email: str, password: str) -> Identity:
        try:
            rows = execute_raw_sql(
                "SELECT id, email, password_hash, user_metadata, created_at FROM users WHERE email = :email",
                {"email": email.strip().lower()}
            )
        except SQLAlchemyError as e:
            logger.exception("Sign-in lookup failed")
            raise AuthError("Could not sign in. Please try again.") from e

        if not rows or not verify_password(password, rows[0]["password_hash"]):
            raise AuthError("Invalid login credentials")
        return _row_to_identity(rows[0])

    def get_user(self, user_id: str) -> Optional[Identity]:
        try:
            rows = execute_raw_sql(
                "SELECT id, email, user_metadata, created_at FROM users WHERE id = :id",
                {"id": user_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load account data.") from e
        return _row_to_identity(rows[0]) if rows else None

    def get_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, Identity]:
        """Batch lookup: one query for the distinct ids."""
        ids = sorted({uid for uid in user_ids if uid})
        if not ids:
            return {}
        statement = text(
            "SELECT id, email, user_metadata, created_at FROM users WHERE id IN :ids"
        ).bindparams(bindparam("ids", expanding=True))
        try:
            rows = execute_raw_sql(statement, {"ids": ids})
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load applicant details.") from e
        return {row["id"]: _row_to_identity(row) for row in rows}

    def update_user_metadata(self, user_id: str, changes: dict) -> Identity:
        """Merge `changes` into the metadata bag. The role cannot be changed here."""
        changes = {k: v for k, v in changes.items() if k != "role"}
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("SELECT id, email, user_metadata, created_at FROM users WHERE id = :id"),
                    {"id": user_id}
                )
                row = result.mappings().fetchone()
                if row is None:
                    raise MutationError("Account not found")
                identity = _row_to_identity(dict(row))
                merged = {**identity.metadata.model_dump(), **changes}
                db.execute(
                    text("UPDATE users SET user_metadata = :metadata WHERE id = :id"),
                    {"id": user_id, "metadata": json.dumps(merged)}
                )
        except SQLAlchemyError as e:
            logger.exception("Metadata update failed for %s", user_id)
            raise MutationError("Failed to update profile. Please try again") from e

        identity.metadata = UserMetadata(**merged)
        return identity


class IdentityResolver:
    """
    Per-request cache over IdentityService.get_users_by_ids.
    Ids already resolved (or known to be missing) are not fetched again.
    """

    def __init__(self, service: IdentityService):
        self.service = service
        self._cache: Dict[str, Optional[Identity]] = {}

    def resolve(self, user_ids: Iterable[str]) -> Dict[str, Optional[Identity]]:
        wanted = {uid for uid in user_ids if uid}
        missing = wanted - self._cache.keys()
        if missing:
            found = self.service.get_users_by_ids(missing)
            for uid in missing:
                self._cache[uid] = found.get(uid)
        return {uid: self._cache[uid] for uid in wanted}

    def applicant(self, user_id: str) -> Applicant:
        identity = self.resolve([user_id]).get(user_id)
        if identity is None:
            return Applicant(id=user_id)
        return identity.to_applicant()


_identity_service: IdentityService = None


def get_identity_service() -> IdentityService:
    """Get or create the identity service (singleton pattern)"""
    global _identity_service
    if _identity_service is None:
        _identity_service = IdentityService()
    return _identity_service
