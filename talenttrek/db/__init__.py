"""
Database module - relational store and MongoDB file storage connections.
"""
from talenttrek.db.postgres import get_db_session, execute_raw_sql, init_schema
from talenttrek.db.mongodb import get_bucket, get_mongo_db

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "init_schema",
    "get_bucket",
    "get_mongo_db"
]
