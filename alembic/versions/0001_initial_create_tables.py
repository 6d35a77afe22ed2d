"""initial create tables
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Use SQLModel metadata creation to ensure consistency
    import lms.models  # noqa: F401
    from sqlmodel import SQLModel
    SQLModel.metadata.create_all(op.get_bind())


def downgrade():
    import lms.models  # noqa: F401
    from sqlmodel import SQLModel
    SQLModel.metadata.drop_all(op.get_bind())
