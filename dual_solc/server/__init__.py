"""HTTP API package for the dual-backend compiler.

WHY: Non-Python tooling needs to submit compilations over HTTP.

HOW: app.py defines the FastAPI app, models.py the pydantic schemas.
"""
