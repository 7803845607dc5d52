"""Initial catalog schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
        )
    return columns


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category_name', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=True),
        sa.Column('parent_category', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.String(), nullable=True),
        sa.Column('is_visible', sa.Boolean(), nullable=True),
        sa.Column('smart_category', sa.Boolean(), nullable=True),
        sa.Column('product_must_watch', sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_categories_id'), 'categories', ['id'], unique=False)
    op.create_index(op.f('ix_categories_category_name'), 'categories', ['category_name'], unique=True)

    op.create_table(
        'brands',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('brand_name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('assets', sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_brands_id'), 'brands', ['id'], unique=False)
    op.create_index(op.f('ix_brands_brand_name'), 'brands', ['brand_name'], unique=True)

    # category_id / brand_id are weak references: no foreign keys
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('long_description', sa.Text(), nullable=True),
        sa.Column('shipping_notes', sa.Text(), nullable=True),
        sa.Column('warranty_info', sa.Text(), nullable=True),
        sa.Column('visible_to_front_end', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('featured_product', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('brand_id', sa.Integer(), nullable=True),
        sa.Column('specifications', sa.JSON(), nullable=False),
        sa.Column('review_ids', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
    op.create_index(op.f('ix_products_product_name'), 'products', ['product_name'], unique=False)
    op.create_index(op.f('ix_products_sku'), 'products', ['sku'], unique=False)
    op.create_index(op.f('ix_products_category_id'), 'products', ['category_id'], unique=False)
    op.create_index(op.f('ix_products_brand_id'), 'products', ['brand_id'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('user', sa.String(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
    op.create_index(op.f('ix_reviews_product_id'), 'reviews', ['product_id'], unique=False)

    op.create_table(
        'product_assets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('product_asset_id', sa.Integer(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('type', sa.Enum('Image', 'Video', 'Document', 'Other', name='assettype', native_enum=False), nullable=False),
        sa.Column('extension', sa.String(), nullable=False),
        sa.Column('binary_data', sa.LargeBinary(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_product_assets_id'), 'product_assets', ['id'], unique=False)
    op.create_index(op.f('ix_product_assets_product_id'), 'product_assets', ['product_id'], unique=False)
    op.create_index('ix_product_assets_product_seq', 'product_assets', ['product_id', 'product_asset_id'], unique=False)

    op.create_table(
        'product_inventory',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('bin', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('on_hand', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('on_hold', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_product_inventory_id'), 'product_inventory', ['id'], unique=False)
    op.create_index(op.f('ix_product_inventory_product_id'), 'product_inventory', ['product_id'], unique=False)
    op.create_index('ix_product_inventory_key', 'product_inventory', ['product_id', 'bin', 'location'], unique=False)

    op.create_table(
        'product_pricing',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('msrp', sa.Float(), nullable=False),
        sa.Column('map', sa.Float(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('sell', sa.Float(), nullable=True),
        sa.Column('base', sa.Float(), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_product_pricing_id'), 'product_pricing', ['id'], unique=False)
    op.create_index(op.f('ix_product_pricing_product_id'), 'product_pricing', ['product_id'], unique=False)
    op.create_index('ix_product_pricing_window', 'product_pricing', ['product_id', 'start_date'], unique=False)

    op.create_table(
        'import_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.String(), nullable=False),
        sa.Column('mode', sa.String(), nullable=False, server_default='add'),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('progress', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('total_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('processed_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('committed_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rejected_rows', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('errors', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_import_tasks_id'), 'import_tasks', ['id'], unique=False)
    op.create_index(op.f('ix_import_tasks_task_id'), 'import_tasks', ['task_id'], unique=True)


def downgrade() -> None:
    op.drop_table('import_tasks')
    op.drop_table('product_pricing')
    op.drop_table('product_inventory')
    op.drop_table('product_assets')
    op.drop_table('reviews')
    op.drop_table('products')
    op.drop_table('brands')
    op.drop_table('categories')
