"""Core Layer — registry state machine: records, statistics, eligibility, enforcement checks.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - No async, no IO: the store and statistics are plain in-memory structures

Design Decisions:
    - Functional core separated from imperative shell; locking and persistence belong
      to services/ (ADR: ExMA impureim sandwich)
"""
