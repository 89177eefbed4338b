"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from talenttrek.api.routes import api_router
    app.include_router(api_router)
"""
