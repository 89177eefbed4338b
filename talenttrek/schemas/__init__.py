"""
Schemas module - Request/Response schemas for API endpoints and page payloads.

Everything lives in schemas.schemas; import from there.
"""
