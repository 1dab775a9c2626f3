"""ORM Models — SQLAlchemy declarative models for the registry tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Core dataclasses never import from here; the SQL repository maps between them

Design Decisions:
    - One file per table for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from athlete_registry.models.athlete_record import AthleteRecordRow  # noqa: F401
from athlete_registry.models.registry_statistics import RegistryStatisticsRow  # noqa: F401
