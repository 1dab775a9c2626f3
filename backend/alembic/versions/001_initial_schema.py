"""Initial schema — athlete_records, registry_statistics.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "athlete_records",
        sa.Column("owner", sa.String(128), primary_key=True),
        sa.Column("position", sa.Integer, nullable=False, unique=True),
        sa.Column("encrypted_name", sa.LargeBinary, nullable=False),
        sa.Column("encrypted_age", sa.LargeBinary, nullable=False),
        sa.Column("encrypted_contact", sa.LargeBinary, nullable=False),
        sa.Column("encrypted_category", sa.LargeBinary, nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("state", sa.String(20), nullable=False, server_default="submitted"),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("decrypted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("plain_name", sa.String(200), nullable=True),
        sa.Column("plain_age", sa.Integer, nullable=True),
        sa.Column("plain_contact", sa.BigInteger, nullable=True),
        sa.CheckConstraint(
            "(state = 'decrypted') = (decrypted_at IS NOT NULL)",
            name="ck_athlete_records_decrypted_at_state",
        ),
    )

    op.create_table(
        "registry_statistics",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("total_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("decrypted_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "cumulative_latency_seconds", sa.Float, nullable=False, server_default="0",
        ),
        sa.CheckConstraint(
            "decrypted_records <= total_records",
            name="ck_registry_statistics_decrypted_le_total",
        ),
    )


def downgrade() -> None:
    op.drop_table("registry_statistics")
    op.drop_table("athlete_records")
