"""Infrastructure Layer — database, coprocessor client, logging.

Invariants:
    - Infrastructure never holds registry logic; it only moves data in and out
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients (ADR: ExMA single responsibility)
"""
