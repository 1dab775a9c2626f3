"""API Layer — FastAPI routes, dependencies and error handlers for the registry.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON; errors use the RegistryError envelope

Design Decisions:
    - Thin routes delegate to services (ADR: ExMA impureim sandwich)
"""
