"""
API Routes
==========

Route modules mounted by the FastAPI application.
"""
