"""
Core Business Logic
==================

Core business logic modules for quote card rendering.

Modules:
- rendering: Input sanitization, HTML card generation and PNG capture
- service: Request validation and render orchestration
"""
