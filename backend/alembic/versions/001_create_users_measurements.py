"""Create users and measurements tables

Revision ID: 001_create_users_measurements
Revises:

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_users_measurements"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("gender", sa.String(), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column(
            "medical_history",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_name", "users", ["last_name", "first_name"], unique=False)

    # No foreign key to users: measurements outlive their user
    op.create_table(
        "measurements",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("measurement_date", sa.Date(), nullable=False),
        sa.Column("height", sa.Float(), server_default="0", nullable=False),
        sa.Column("weight", sa.Float(), server_default="0", nullable=False),
        sa.Column("tug", postgresql.JSONB(), nullable=False),
        sa.Column("walking_speed", postgresql.JSONB(), nullable=False),
        sa.Column("fr", postgresql.JSONB(), nullable=False),
        sa.Column("cs10", sa.Integer(), server_default="0", nullable=False),
        sa.Column("bi", sa.Integer(), server_default="0", nullable=False),
        sa.Column("notes", sa.String(), server_default="", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "measurement_date", name="uq_measurements_user_date"
        ),
    )
    op.create_index(
        op.f("ix_measurements_user_id"), "measurements", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_measurements_measurement_date"),
        "measurements",
        ["measurement_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_measurements_measurement_date"), table_name="measurements")
    op.drop_index(op.f("ix_measurements_user_id"), table_name="measurements")
    op.drop_table("measurements")
    op.drop_index("ix_users_name", table_name="users")
    op.drop_table("users")
