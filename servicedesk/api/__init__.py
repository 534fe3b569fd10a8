"""
API/Presentation Layer
======================

HTTP API layer using FastAPI.
This layer handles HTTP requests and responses.

Contains:
- Controllers: FastAPI route handlers (v1)
- Middleware: correlation ids and CSRF checks
- Error handlers: the JSON error envelope
- Dependencies: Dependency injection setup
"""
