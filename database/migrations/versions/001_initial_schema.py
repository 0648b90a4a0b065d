"""Initial database schema

Revision ID: 001
Revises: 
Create Date: 2025-11-28

Creates settings, catalog, customers, quotes and orders tables.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Company settings (single slot)
    op.create_table('company_settings',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('owner_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('email', sa.String(255)),
        sa.Column('logo_base64', sa.Text()),
        sa.Column('default_observations', sa.Text()),
        sa.Column('product_mode', sa.String(20)),
        sa.Column('pdf_theme', sa.String(20)),
        sa.Column('password_hash', sa.String(255)),
        sa.Column('shipping_rate_per_km', sa.Float()),
        sa.Column('origin_address', sa.Text()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('id = 1', name='ck_company_settings_single_slot')
    )

    # Categories table
    op.create_table('categories',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_categories_name', 'categories', ['name'])

    # Products table
    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('cost_price', sa.Float()),
        sa.Column('description', sa.Text()),
        sa.Column('unit', sa.String(20)),
        sa.Column('photo_base64', sa.Text()),
        sa.Column('category_id', sa.Integer()),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_active', 'products', ['active'])

    # Customers table
    op.create_table('customers',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('birthday', sa.String(10)),
        sa.Column('anniversary_date', sa.String(10)),
        sa.Column('observations', sa.Text()),
        sa.Column('address', sa.JSON()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_customers_name', 'customers', ['name'])
    op.create_index('ix_customers_birthday', 'customers', ['birthday'])

    # Quotes table
    op.create_table('quotes',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(255)),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('validity', sa.String(10), nullable=False),
        sa.Column('delivery_date', sa.String(10)),
        sa.Column('items', sa.JSON()),
        sa.Column('discount', sa.Float()),
        sa.Column('shipping_fee', sa.Float()),
        sa.Column('total', sa.Float()),
        sa.Column('observations', sa.Text()),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('attachments', sa.JSON()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_quotes_customer_id', 'quotes', ['customer_id'])
    op.create_index('ix_quotes_date', 'quotes', ['date'])
    op.create_index('ix_quotes_status', 'quotes', ['status'])

    # Orders table
    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('quote_id', sa.Integer()),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(255)),
        sa.Column('items', sa.JSON()),
        sa.Column('total', sa.Float()),
        sa.Column('delivery_date', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('observations', sa.Text()),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_delivery_date', 'orders', ['delivery_date'])
    op.create_index('ix_orders_status', 'orders', ['status'])


def downgrade() -> None:
    op.drop_table('orders')
    op.drop_table('quotes')
    op.drop_table('customers')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('company_settings')
