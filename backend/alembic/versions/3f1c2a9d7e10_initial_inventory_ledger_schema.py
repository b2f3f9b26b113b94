"""Initial inventory ledger schema

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:41.503117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('phone', sa.String(length=15), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_name'), 'users', ['name'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Products with stock counters
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=255), nullable=False),
        sa.Column('variation', sa.String(length=255), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=False),
        sa.Column('hpp_per_piece', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('stock_in', sa.Integer(), nullable=False),
        sa.Column('stock_out', sa.Integer(), nullable=False),
        sa.Column('total_stock', sa.Integer(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('hpp_per_piece >= 0'),
        sa.CheckConstraint('stock_in >= 0'),
        sa.CheckConstraint('stock_out >= 0'),
        sa.CheckConstraint('total_stock >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
    op.create_index(op.f('ix_products_code'), 'products', ['code'], unique=True)
    op.create_index(op.f('ix_products_name'), 'products', ['name'], unique=False)

    # Reference data
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_categories_id'), 'categories', ['id'], unique=False)
    op.create_index(op.f('ix_categories_name'), 'categories', ['name'], unique=True)

    for table in ('note_types', 'storage_locations'):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_suppliers_id'), 'suppliers', ['id'], unique=False)
    op.create_index(op.f('ix_suppliers_name'), 'suppliers', ['name'], unique=False)

    for table in ('customers', 'vendors'):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('phone', sa.String(length=50), nullable=True),
            sa.Column('address', sa.String(length=500), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)
        op.create_index(op.f(f'ix_{table}_name'), table, ['name'], unique=False)
        op.create_index(op.f(f'ix_{table}_email'), table, ['email'], unique=True)

    # Ledgers - references are plain integer columns, no FK constraints
    op.create_table(
        'goods_in',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('note_type_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('entered_by_id', sa.Integer(), nullable=False),
        sa.Column('storage_location_id', sa.Integer(), nullable=False),
        sa.Column('note_number', sa.String(length=100), nullable=False),
        sa.Column('additional_notes', sa.String(), nullable=True),
        sa.Column('qty_in', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=False),
        sa.Column('hpp', sa.Numeric(precision=14, scale=2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('qty_in > 0'),
        sa.CheckConstraint('hpp >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_goods_in_id'), 'goods_in', ['id'], unique=False)
    op.create_index(op.f('ix_goods_in_date'), 'goods_in', ['date'], unique=False)
    op.create_index(op.f('ix_goods_in_product_id'), 'goods_in', ['product_id'], unique=False)

    op.create_table(
        'goods_out',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('note_type_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('handled_by_id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('note_number', sa.String(length=100), nullable=False),
        sa.Column('additional_info', sa.String(), nullable=True),
        sa.Column('qty_out', sa.Integer(), nullable=False),
        sa.Column('product_name_snapshot', sa.String(length=255), nullable=True),
        sa.Column('hpp_snapshot', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('unit_snapshot', sa.String(length=50), nullable=True),
        sa.Column('total_hpp', sa.Numeric(precision=16, scale=2), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('qty_out > 0'),
        sa.CheckConstraint('hpp_snapshot >= 0'),
        sa.CheckConstraint('total_hpp >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_goods_out_id'), 'goods_out', ['id'], unique=False)
    op.create_index(op.f('ix_goods_out_date'), 'goods_out', ['date'], unique=False)
    op.create_index(op.f('ix_goods_out_product_id'), 'goods_out', ['product_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in ('goods_out', 'goods_in', 'vendors', 'customers', 'suppliers',
                  'storage_locations', 'note_types', 'categories', 'products', 'users'):
        op.drop_table(table)
