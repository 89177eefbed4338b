"""
Relational store connection.

PostgreSQL in production; any SQLAlchemy URL works, SQLite is used for
local runs and the test suite. All queries are plain SQL through text().
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker

from talenttrek.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

_url = settings.sqlalchemy_url
_is_sqlite = _url.startswith("sqlite")

if _is_sqlite:
    # Page controllers fan out reads on the thread pool
    engine = create_engine(
        _url,
        connect_args={"check_same_thread": False},
        echo=settings.debug
    )

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    engine = create_engine(
        _url,
        pool_size=5,
        max_overflow=10,
        echo=settings.debug  # Log SQL queries in debug mode
    )

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id VARCHAR(36) PRIMARY KEY,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        user_metadata TEXT NOT NULL DEFAULT '{}',
        created_at TIMESTAMP WITH TIME ZONE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS companies (
        company_id VARCHAR(36) PRIMARY KEY,
        name VARCHAR(200) NOT NULL,
        description TEXT,
        location VARCHAR(200) NOT NULL,
        user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TIMESTAMP WITH TIME ZONE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS jobs (
        job_id VARCHAR(36) PRIMARY KEY,
        company_id VARCHAR(36) NOT NULL REFERENCES companies(company_id) ON DELETE CASCADE,
        title VARCHAR(200) NOT NULL,
        description TEXT NOT NULL,
        requirements TEXT NOT NULL,
        salary NUMERIC(12, 2),
        location VARCHAR(200) NOT NULL,
        created_at TIMESTAMP WITH TIME ZONE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS applications (
        application_id VARCHAR(36) PRIMARY KEY,
        job_id VARCHAR(36) NOT NULL REFERENCES jobs(job_id) ON DELETE CASCADE,
        user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        status VARCHAR(20) NOT NULL DEFAULT 'pending',
        applied_at TIMESTAMP WITH TIME ZONE NOT NULL,
        cover_letter TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_companies_user ON companies (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs (company_id)",
    "CREATE INDEX IF NOT EXISTS idx_applications_job ON applications (job_id)",
    "CREATE INDEX IF NOT EXISTS idx_applications_user ON applications (user_id)",
]


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_schema() -> None:
    """Create tables and indexes if they don't exist yet."""
    with get_db_session() as db:
        for statement in SCHEMA_STATEMENTS:
            db.execute(text(statement))
    logger.info("Database schema ready")


def test_postgres_connection() -> bool:
    """
    Test if the relational store is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("Database connection failed: %s", e)
        return False


def execute_raw_sql(sql, params: dict = None) -> list:
    """
    Execute SQL and return results as list of dicts.
    Accepts a string or a prepared text() clause (for expanding IN params).
    """
    statement = text(sql) if isinstance(sql, str) else sql
    with get_db_session() as db:
        result = db.execute(statement, params or {})
        # Convert rows to dicts
        columns = result.keys()
        return [dict(zip(columns, row)) for row in result.fetchall()]
