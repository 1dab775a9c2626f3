"""Schemas Layer — Pydantic request/response models for the HTTP boundary.

Invariants:
    - Schemas validate shape and value ranges only; registry rules live in core/

Design Decisions:
    - Separate from ORM models and core dataclasses (ADR: API contract evolves independently)
"""
