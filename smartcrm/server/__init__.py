"""
SmartCRM Server Package.

This package contains the web server implementation for SmartCRM.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    services: Business logic (relationship memory, smart notes, sync channel).
    schemas: Pydantic schemas for API request/response validation.
"""
