"""project documents table

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:12:00.000000
"""
from typing import Sequence, Union

from alembic import op


revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per project; the whole tree lives in the document column
    op.execute("""
        CREATE TABLE project_documents (
            project_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            document JSONB NOT NULL,
            created_at TIMESTAMPTZ DEFAULT now(),
            updated_at TIMESTAMPTZ DEFAULT now()
        );
    """)

    op.execute("""
        CREATE INDEX idx_project_documents_name ON project_documents(name);
    """)
    op.execute("""
        CREATE INDEX idx_project_documents_updated ON project_documents(updated_at);
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS project_documents CASCADE;")
