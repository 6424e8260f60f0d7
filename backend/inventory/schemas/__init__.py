"""Pydantic Schemas — request/response validation for JSON API endpoints.

Invariants:
    - Schemas validate at system boundary (JSON bodies, API responses)
    - Multipart asset/booking forms are NOT validated here: they go through the
      merged-schema pipeline in core/ because their fields vary per organization

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
