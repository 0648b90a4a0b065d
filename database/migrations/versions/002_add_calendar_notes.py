"""Add calendar notes and quote delivery scheduling

Revision ID: 002
Revises: 001
Create Date: 2025-12-04

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('calendar_notes',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_calendar_notes_date', 'calendar_notes', ['date'], unique=True)

    # Calendar lookups scan quotes by delivery date
    op.create_index('ix_quotes_delivery_date', 'quotes', ['delivery_date'])
    op.add_column('quotes', sa.Column('shipping_distance', sa.Float(), nullable=True))


def downgrade():
    with op.batch_alter_table('quotes') as batch_op:
        batch_op.drop_column('shipping_distance')
    op.drop_index('ix_quotes_delivery_date', table_name='quotes')
    op.drop_index('ix_calendar_notes_date', table_name='calendar_notes')
    op.drop_table('calendar_notes')
