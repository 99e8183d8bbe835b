"""initial storefront schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(10, 2)


def upgrade():
    op.create_table(
        'drops',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=True),
        sa.Column('activated_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_drops_status_scheduled', 'drops', ['status', 'scheduled_date'])

    op.create_table(
        'products',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('size', sa.String(20), nullable=True),
        sa.Column('condition', sa.String(20), nullable=True),
        sa.Column('price', MONEY, nullable=False),
        sa.Column('cost', MONEY, nullable=False),
        sa.Column('available', sa.Boolean(), nullable=False),
        sa.Column('drop_id', sa.String(64), sa.ForeignKey('drops.id'), nullable=True),
        sa.Column('submission_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_products_drop_id', 'products', ['drop_id'])
    op.create_index('ix_products_drop_available', 'products', ['drop_id', 'available'])

    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.String(64), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
    )
    op.create_index('ix_product_images_product_id', 'product_images', ['product_id'])

    op.create_table(
        'drop_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('drop_id', sa.String(64), sa.ForeignKey('drops.id'), nullable=False),
        sa.Column('item_id', sa.String(64), sa.ForeignKey('products.id'), nullable=False, unique=True),
        sa.Column('position', sa.Integer(), nullable=False),
    )
    op.create_index('ix_drop_items_drop_id', 'drop_items', ['drop_id'])

    op.create_table(
        'seller_submissions',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('item_type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('condition', sa.String(20), nullable=False),
        sa.Column('era', sa.String(20), nullable=True),
        sa.Column('estimate', sa.String(50), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('admin_price', MONEY, nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('rejected_from', sa.String(20), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('seller_approved_at', sa.DateTime(), nullable=True),
        sa.Column('inventory_item_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_submissions_status_created', 'seller_submissions', ['status', 'created_at'])

    op.create_table(
        'submission_photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('submission_id', sa.String(64), sa.ForeignKey('seller_submissions.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
    )
    op.create_index('ix_submission_photos_submission_id', 'submission_photos', ['submission_id'])

    op.create_table(
        'orders',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('customer_name', sa.String(100), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('ship_street', sa.String(200), nullable=False),
        sa.Column('ship_apt', sa.String(50), nullable=True),
        sa.Column('ship_city', sa.String(100), nullable=False),
        sa.Column('ship_state', sa.String(50), nullable=False),
        sa.Column('ship_zip', sa.String(20), nullable=False),
        sa.Column('total', MONEY, nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('payment_method', sa.String(30), nullable=False),
        sa.Column('payment_reference', sa.String(255), nullable=True),
        sa.Column('tracking_number', sa.String(100), nullable=True),
        sa.Column('tracking_url', sa.Text(), nullable=True),
        sa.Column('carrier', sa.String(50), nullable=True),
        sa.Column('service', sa.String(100), nullable=True),
        sa.Column('shipping_cost', MONEY, nullable=True),
        sa.Column('label_url', sa.Text(), nullable=True),
        sa.Column('label_transaction_id', sa.String(100), nullable=True),
        sa.Column('label_created_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_orders_status_created', 'orders', ['status', 'created_at'])

    op.create_table(
        'order_lines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.String(64), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('product_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('price', MONEY, nullable=False),
    )
    op.create_index('ix_order_lines_order_id', 'order_lines', ['order_id'])

    op.create_table(
        'syndicated_listings',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('platform', sa.String(50), nullable=False),
        sa.Column('price', sa.String(50), nullable=True),
        sa.Column('link', sa.Text(), nullable=False),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'approved_listings',
        sa.Column('ebay_item_id', sa.String(100), primary_key=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'store_events',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('link', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )


def downgrade():
    op.drop_table('store_events')
    op.drop_table('approved_listings')
    op.drop_table('syndicated_listings')
    op.drop_index('ix_order_lines_order_id', table_name='order_lines')
    op.drop_table('order_lines')
    op.drop_index('ix_orders_status_created', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_submission_photos_submission_id', table_name='submission_photos')
    op.drop_table('submission_photos')
    op.drop_index('ix_submissions_status_created', table_name='seller_submissions')
    op.drop_table('seller_submissions')
    op.drop_index('ix_drop_items_drop_id', table_name='drop_items')
    op.drop_table('drop_items')
    op.drop_index('ix_product_images_product_id', table_name='product_images')
    op.drop_table('product_images')
    op.drop_index('ix_products_drop_available', table_name='products')
    op.drop_index('ix_products_drop_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_drops_status_scheduled', table_name='drops')
    op.drop_table('drops')
