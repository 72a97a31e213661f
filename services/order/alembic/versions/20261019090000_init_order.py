
from alembic import op
import sqlalchemy as sa

revision = "20261019090000"
down_revision = None

def upgrade():
    op.create_table(
        'orders',
        sa.Column('order_id', sa.String(length=36), primary_key=True),
        sa.Column('customer_id', sa.String(length=64), index=True, nullable=False),
        sa.Column('restaurant_id', sa.String(length=64), index=True, nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_contact', sa.String(length=64), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('order_total', sa.Float(), nullable=False),
        sa.Column('delivery_fee', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('payment_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='PENDING'),
        sa.Column('driver_id', sa.String(length=64), nullable=True),
        sa.Column('driver_name', sa.String(length=255), nullable=True),
        sa.Column('vehicle_number', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text("(now() at time zone 'utc')")),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text("(now() at time zone 'utc')")),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.order_id', ondelete='CASCADE'), index=True, nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.String(length=64), nullable=False),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('portion_size', sa.String(length=16), nullable=False, server_default='Small'),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
    )

def downgrade():
    op.drop_table('order_items')
    op.drop_table('orders')
