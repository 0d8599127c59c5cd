"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to quote card rendering.

Endpoints:
- GET /: Service descriptor and health check
- POST /api/generate-tweet: Render a quote card to PNG
"""
