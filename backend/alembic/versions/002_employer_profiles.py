"""Employer profiles - company details and business document

Revision ID: 002_employer_profiles
Revises: 001_initial
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_employer_profiles"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "employer_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("barangay", sa.String(length=100), nullable=True),
        sa.Column("contact_person", sa.String(length=200), nullable=True),
        sa.Column("contact_number", sa.String(length=50), nullable=True),
        sa.Column("position_hiring_for", sa.String(length=200), nullable=True),
        sa.Column("document_base64", sa.Text(), nullable=True),
        sa.Column("document_name", sa.String(length=255), nullable=True),
        sa.Column("document_url", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employer_profiles_id"), "employer_profiles", ["id"], unique=False)
    op.create_index(op.f("ix_employer_profiles_user_id"), "employer_profiles", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_employer_profiles_user_id"), table_name="employer_profiles")
    op.drop_index(op.f("ix_employer_profiles_id"), table_name="employer_profiles")
    op.drop_table("employer_profiles")
