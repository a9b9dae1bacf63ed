"""
create terms, labels and clean_contents

Revision ID: b1c4e2a90d17
Revises:
Create Date: 2026-10-19 09:12:41.508311
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b1c4e2a90d17'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'labels',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('label', sa.String(128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('label', name='uq_label_label'),
    )
    op.create_table(
        'terms',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('document_frequency', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('text', name='uq_term_text'),
    )
    op.create_table(
        'clean_contents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('legal', sa.Boolean(), nullable=True, index=True),
        sa.Column('legal_certainty', sa.Float(), nullable=True),
        sa.Column('class_certainty', sa.Float(), nullable=True),
        sa.Column('primary_label_id', sa.String(36), nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['primary_label_id'], ['labels.id'], ondelete='SET NULL'),
    )


def downgrade() -> None:
    op.drop_table('clean_contents')
    op.drop_table('terms')
    op.drop_table('labels')
