"""
Quote Card API
==============

An HTTP service that renders social-media quote cards (avatar, name, handle
and message text on a styled canvas) into PNG images.

This package provides:
- FastAPI REST endpoints for HTTP access
- Input sanitization and HTML card generation
- Browser automation with Playwright for pixel-exact PNG capture
"""

__version__ = "1.0.0"
__author__ = "Quote Card API Team"
