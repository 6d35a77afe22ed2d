"""index quiz responses by completion time
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_response_completed_at'
down_revision = '0001_initial'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = {ix["name"] for ix in inspector.get_indexes("quiz_response")}
    if "ix_quiz_response_completed_at" in existing:
        return
    op.create_index("ix_quiz_response_completed_at", "quiz_response", ["completed_at"])


def downgrade():
    op.drop_index("ix_quiz_response_completed_at", table_name="quiz_response")
