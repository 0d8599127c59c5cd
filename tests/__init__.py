"""
Test Suite
==========

Test suite matching the quotecard/ package structure.

Test Categories:
- unit: Sanitizer, document builder, render engine and service
- integration: HTTP contract of the API with a spy or mocked render engine
- e2e: Rendering with a real Chromium instance (marked e2e)
"""
