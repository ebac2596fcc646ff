"""
Cleanfeed Dashboard - operator console for the clean-feed recorder.

This package contains the complete application:
- core: Framework-agnostic catalog and dashboard logic
- infrastructure: Object storage and config-file integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
