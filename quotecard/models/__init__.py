"""
Data Models
===========

Pydantic models for quote requests, the render canvas contract, rendered
images and API payloads.
"""
