"""Initial schema: users, sessions, news, seasons and schema_meta.

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op  # type: ignore[attr-defined]
from sqlmodel import SQLModel

from hsc_api.schemas.auth import User, UserSession
from hsc_api.schemas.base import utcnow
from hsc_api.schemas.news import NewsArticle
from hsc_api.schemas.schema_meta import SCHEMA_VERSION, SchemaMeta
from hsc_api.schemas.seasons import Season

revision = "a0b1c2d3e4f5"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    # Season's table args carry the single-active partial unique index
    SQLModel.metadata.create_all(
        bind=bind,
        tables=[
            SchemaMeta.__table__,  # type: ignore[attr-defined]
            User.__table__,  # type: ignore[attr-defined]
            UserSession.__table__,  # type: ignore[attr-defined]
            NewsArticle.__table__,  # type: ignore[attr-defined]
            Season.__table__,  # type: ignore[attr-defined]
        ],
    )
    op.execute(
        sa.insert(SchemaMeta.__table__).values(  # type: ignore[attr-defined]
            version=SCHEMA_VERSION, updated_at=utcnow()
        )
    )


def downgrade() -> None:
    bind = op.get_bind()
    SQLModel.metadata.drop_all(
        bind=bind,
        tables=[
            Season.__table__,  # type: ignore[attr-defined]
            NewsArticle.__table__,  # type: ignore[attr-defined]
            UserSession.__table__,  # type: ignore[attr-defined]
            User.__table__,  # type: ignore[attr-defined]
            SchemaMeta.__table__,  # type: ignore[attr-defined]
        ],
    )
