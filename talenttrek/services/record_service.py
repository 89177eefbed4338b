"""
Record Service - table-level CRUD for companies, jobs and applications.

One store class per table. Every call is a single independent request
against the relational store: equality/IN filters, ordering and limits,
no joins and no transactions spanning calls. Page controllers stitch the
rows together in memory (see services.aggregation).

Read failures raise DataFetchError, write failures MutationError.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from talenttrek.core.errors import DataFetchError, MutationError
from talenttrek.db.postgres import execute_raw_sql, get_db_session

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _select_in(columns: str, table: str, column: str, suffix: str = ""):
    return text(
        f"SELECT {columns} FROM {table} WHERE {column} IN :values {suffix}"
    ).bindparams(bindparam("values", expanding=True))


def _normalize_job(row: dict) -> dict:
    # NUMERIC comes back as Decimal from PostgreSQL
    if row.get("salary") is not None:
        row["salary"] = float(row["salary"])
    return row


# ============================================================
# COMPANIES
# ============================================================

class CompanyStore:
    COLUMNS = "company_id, name, description, location, user_id, created_at"

    def list_all(self) -> List[dict]:
        try:
            return execute_raw_sql(f"SELECT {self.COLUMNS} FROM companies ORDER BY name")
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load companies.") from e

    def list_for_user(self, user_id: str) -> List[dict]:
        try:
            return execute_raw_sql(
                f"SELECT {self.COLUMNS} FROM companies WHERE user_id = :uid ORDER BY created_at",
                {"uid": user_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load company data.") from e

    def list_by_ids(self, company_ids: Iterable[str]) -> List[dict]:
        ids = sorted(set(company_ids))
        if not ids:
            return []
        try:
            return execute_raw_sql(
                _select_in(self.COLUMNS, "companies", "company_id"), {"values": ids}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load companies.") from e

    def get(self, company_id: str) -> Optional[dict]:
        try:
            rows = execute_raw_sql(
                f"SELECT {self.COLUMNS} FROM companies WHERE company_id = :cid",
                {"cid": company_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load company.") from e
        return rows[0] if rows else None

    def create(self, user_id: str, name: str, description: str, location: str) -> dict:
        row = {
            "company_id": _new_id(),
            "name": name,
            "description": description,
            "location": location,
            "user_id": user_id,
            "created_at": _now()
        }
        try:
            with get_db_session() as db:
                db.execute(
                    text("""
                        INSERT INTO companies (company_id, name, description, location, user_id, created_at)
                        VALUES (:company_id, :name, :description, :location, :user_id, :created_at)
                    """),
                    row
                )
        except SQLAlchemyError as e:
            logger.exception("Error adding company")
            raise MutationError("Failed to add company. Please try again.") from e
        return row

    def update(self, company_id: str, user_id: str, changes: dict) -> Optional[dict]:
        """Update owned company. Returns the fresh row, None if not owned/found."""
        updates = []
        params = {"cid": company_id, "uid": user_id}
        for field in ["name", "description", "location"]:
            if changes.get(field) is not None:
                updates.append(f"{field} = :{field}")
                params[field] = changes[field]

        try:
            with get_db_session() as db:
                if updates:
                    result = db.execute(
                        text(f"UPDATE companies SET {', '.join(updates)} WHERE company_id = :cid AND user_id = :uid"),
                        params
                    )
                    if result.rowcount == 0:
                        return None
                row = db.execute(
                    text(f"SELECT {self.COLUMNS} FROM companies WHERE company_id = :cid AND user_id = :uid"),
                    params
                ).mappings().fetchone()
        except SQLAlchemyError as e:
            logger.exception("Error updating company %s", company_id)
            raise MutationError("Failed to update company") from e
        return dict(row) if row else None

    def delete(self, company_id: str, user_id: str) -> bool:
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("DELETE FROM companies WHERE company_id = :cid AND user_id = :uid"),
                    {"cid": company_id, "uid": user_id}
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception("Error deleting company %s", company_id)
            raise MutationError("Failed to delete company") from e


# ============================================================
# JOBS
# ============================================================

class JobStore:
    COLUMNS = "job_id, company_id, title, description, requirements, salary, location, created_at"

    def list_all(self) -> List[dict]:
        """All jobs, newest first."""
        try:
            rows = execute_raw_sql(f"SELECT {self.COLUMNS} FROM jobs ORDER BY created_at DESC")
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job data.") from e
        return [_normalize_job(r) for r in rows]

    def list_for_companies(self, company_ids: Iterable[str], limit: Optional[int] = None) -> List[dict]:
        ids = sorted(set(company_ids))
        if not ids:
            return []
        suffix = "ORDER BY created_at DESC"
        if limit:
            suffix += f" LIMIT {int(limit)}"
        try:
            rows = execute_raw_sql(_select_in(self.COLUMNS, "jobs", "company_id", suffix), {"values": ids})
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job data.") from e
        return [_normalize_job(r) for r in rows]

    def list_by_ids(self, job_ids: Iterable[str]) -> List[dict]:
        ids = sorted(set(job_ids))
        if not ids:
            return []
        try:
            rows = execute_raw_sql(_select_in(self.COLUMNS, "jobs", "job_id"), {"values": ids})
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job data.") from e
        return [_normalize_job(r) for r in rows]

    def get(self, job_id: str) -> Optional[dict]:
        try:
            rows = execute_raw_sql(
                f"SELECT {self.COLUMNS} FROM jobs WHERE job_id = :jid", {"jid": job_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job details.") from e
        return _normalize_job(rows[0]) if rows else None

    def create(self, company_id: str, title: str, description: str, requirements: str,
               salary: Optional[float], location: str) -> dict:
        row = {
            "job_id": _new_id(),
            "company_id": company_id,
            "title": title,
            "description": description,
            "requirements": requirements,
            "salary": salary,
            "location": location,
            "created_at": _now()
        }
        try:
            with get_db_session() as db:
                db.execute(
                    text("""
                        INSERT INTO jobs (job_id, company_id, title, description, requirements, salary, location, created_at)
                        VALUES (:job_id, :company_id, :title, :description, :requirements, :salary, :location, :created_at)
                    """),
                    row
                )
        except SQLAlchemyError as e:
            logger.exception("Error posting job")
            raise MutationError("Failed to post job. Please try again.") from e
        return row

    def delete(self, job_id: str) -> bool:
        try:
            with get_db_session() as db:
                result = db.execute(text("DELETE FROM jobs WHERE job_id = :jid"), {"jid": job_id})
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception("Error deleting job %s", job_id)
            raise MutationError("Failed to delete job. Please try again.") from e


# ============================================================
# APPLICATIONS
# ============================================================

class ApplicationStore:
    COLUMNS = "application_id, job_id, user_id, status, applied_at, cover_letter"

    def list_for_user(self, user_id: str) -> List[dict]:
        """The applicant's own applications, newest first."""
        try:
            return execute_raw_sql(
                f"SELECT {self.COLUMNS} FROM applications WHERE user_id = :uid ORDER BY applied_at DESC",
                {"uid": user_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load your applications.") from e

    def list_for_jobs(self, job_ids: Iterable[str], limit: Optional[int] = None) -> List[dict]:
        ids = sorted(set(job_ids))
        if not ids:
            return []
        suffix = "ORDER BY applied_at DESC"
        if limit:
            suffix += f" LIMIT {int(limit)}"
        try:
            return execute_raw_sql(_select_in(self.COLUMNS, "applications", "job_id", suffix), {"values": ids})
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job applications.") from e

    def count_for_jobs(self, job_ids: Iterable[str]) -> int:
        ids = sorted(set(job_ids))
        if not ids:
            return 0
        try:
            rows = execute_raw_sql(
                _select_in("COUNT(*) AS total", "applications", "job_id"), {"values": ids}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load job applications.") from e
        return int(rows[0]["total"]) if rows else 0

    def get(self, application_id: str) -> Optional[dict]:
        try:
            rows = execute_raw_sql(
                f"SELECT {self.COLUMNS} FROM applications WHERE application_id = :aid",
                {"aid": application_id}
            )
        except SQLAlchemyError as e:
            raise DataFetchError("Failed to load application.") from e
        return rows[0] if rows else None

    def create(self, job_id: str, user_id: str, cover_letter: Optional[str]) -> dict:
        row = {
            "application_id": _new_id(),
            "job_id": job_id,
            "user_id": user_id,
            "status": "pending",
            "applied_at": _now(),
            "cover_letter": cover_letter or None
        }
        try:
            with get_db_session() as db:
                db.execute(
                    text("""
                        INSERT INTO applications (application_id, job_id, user_id, status, applied_at, cover_letter)
                        VALUES (:application_id, :job_id, :user_id, :status, :applied_at, :cover_letter)
                    """),
                    row
                )
        except SQLAlchemyError as e:
            logger.exception("Error submitting application for job %s", job_id)
            raise MutationError("Failed to apply for job.") from e
        return row

    def update_status(self, application_id: str, status: str) -> bool:
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("UPDATE applications SET status = :status WHERE application_id = :aid"),
                    {"aid": application_id, "status": status}
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception("Error updating application status")
            raise MutationError("Failed to update application status. Please try again.") from e

    def delete(self, application_id: str) -> bool:
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("DELETE FROM applications WHERE application_id = :aid"),
                    {"aid": application_id}
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception("Error deleting application")
            raise MutationError("Failed to delete application. Please try again.") from e


class RecordService:
    """Bundle of the three stores, injected into the page controllers."""

    def __init__(self):
        self.companies = CompanyStore()
        self.jobs = JobStore()
        self.applications = ApplicationStore()


_record_service: RecordService = None


def get_record_service() -> RecordService:
    """Get or create the record service (singleton pattern)"""
    global _record_service
    if _record_service is None:
        _record_service = RecordService()
    return _record_service
