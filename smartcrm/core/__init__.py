"""
Core utilities and configuration for SmartCRM.

This package provides core functionality including logging configuration,
monitoring, database setup, and other shared utilities.
"""

from smartcrm.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
