"""
MongoDB Connection Utility

MongoDB backs the object storage used for uploads:
- Resumes attached at sign-up
- Profile photos

Files live in a GridFS bucket; the application hands out
/files/{file_id} as the public URL.
"""
import logging

from gridfs import GridFSBucket
from pymongo import MongoClient
from pymongo.database import Database

from talenttrek.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None
_bucket: GridFSBucket = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the file storage database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_bucket() -> GridFSBucket:
    """Get the GridFS bucket uploads are written to."""
    global _bucket
    if _bucket is None:
        _bucket = GridFSBucket(get_mongo_db(), bucket_name=settings.storage_bucket)
    return _bucket


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False
