"""
Rendering Module
===============

HTML generation and PNG creation with browser automation.

Components:
- sanitizer: Escape untrusted text and validate image references
- html_generator: Compose the quote card HTML document
- png_generator: Browser automation for PNG screenshot generation
- templates: Jinja2 card template
"""
