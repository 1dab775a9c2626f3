"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services hold the registry lock; core functions never await
    - External calls (proof verification, disclosure binding, persistence) happen here

Design Decisions:
    - Controllers receive collaborators by constructor injection (ADR: testable with fakes)
"""
