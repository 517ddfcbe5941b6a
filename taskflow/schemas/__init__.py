"""Pydantic Schemas — request bodies and response models for API endpoints.

Invariants:
    - Request bodies only coerce types; field rules run in the pipeline's validation step
    - Response models never expose password hashes or refresh tokens except TokenResponse
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
