"""Initial migration - create the students table

Revision ID: 001_create_students
Revises: None
Create Date: 2025-03-02

Creates the single table of the Student Records service:
- students: personal and academic fields, email unique

Integer ids are assigned by the database (autoincrement / identity).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_create_students'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('middle_name', sa.Text(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.Text(), nullable=False),
        sa.Column('course', sa.Text(), nullable=False),
        sa.Column('year_level', sa.Text(), nullable=False),
        sa.Column('section', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('email', name='students_email_unique'),
    )


def downgrade() -> None:
    op.drop_table('students')
