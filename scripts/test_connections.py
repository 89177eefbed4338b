#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database, object storage and question generator are reachable.
Usage: python scripts/test_connections.py
"""
from talenttrek.core.config import get_settings
from talenttrek.db.mongodb import test_mongo_connection
from talenttrek.db.postgres import test_postgres_connection
from talenttrek.services.question_service import get_question_generator


def main():
    settings = get_settings()
    print("=" * 50)
    print("TALENTTREK - CONNECTION TEST")
    print("=" * 50)

    # Relational store
    print("\n[1] Testing database...")
    print(f"    Host: {settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}"
          if not settings.database_url else "    URL: (TALENTTREK_DATABASE_URL)")
    if test_postgres_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    # Object storage
    print("\n[2] Testing MongoDB (GridFS bucket)...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}  Bucket: {settings.storage_bucket}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    # Question generator (only if API key is set)
    print("\n[3] Testing DeepSeek API...")
    if not settings.deepseek_api_key:
        print("    ⚠️  DeepSeek: API key not set (skipping)")
    else:
        try:
            questions = get_question_generator().generate("Software Engineer")
            print(f"    ✅ DeepSeek: CONNECTED ({len(questions)} questions)")
        except Exception as e:
            print(f"    ❌ DeepSeek: FAILED ({e})")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
