"""
Exception handlers for the SmartCRM server.

Action endpoints report their own failures inside an ``ActionResult``; the
handlers here only catch what escapes the CRUD endpoints.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
