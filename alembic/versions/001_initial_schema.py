"""initial schema: users, customers, leads, category limits, audit log

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = postgresql.ENUM('manager', 'sales', 'finance', name='user_role', create_type=False)
customer_status = postgresql.ENUM('lead', 'active', 'inactive', name='customer_status', create_type=False)
lead_status = postgresql.ENUM('new', 'converted', 'not_converted', name='lead_status', create_type=False)
lead_priority = postgresql.ENUM('high', 'medium', 'low', name='lead_priority', create_type=False)
lead_category = postgresql.ENUM(
    'local_new', 'local_used', 'premium_export', 'regular_export', 'commercial_export',
    name='lead_category',
    create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (user_role, customer_status, lead_status, lead_priority, lead_category):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False, server_default='sales'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('target_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('commission', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('bonus_commission', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('commission_earned', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('status', customer_status, nullable=False, server_default='lead'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=False)

    op.create_table(
        'leads',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('lead_name', sa.String(length=255), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', lead_status, nullable=False, server_default='new'),
        sa.Column('priority', lead_priority, nullable=False, server_default='medium'),
        sa.Column('category', lead_category, nullable=True),
        sa.Column('source', sa.String(length=100), nullable=True),
        sa.Column('car_company', sa.String(length=100), nullable=True),
        sa.Column('model', sa.String(length=100), nullable=True),
        sa.Column('trim', sa.String(length=100), nullable=True),
        sa.Column('spec', sa.String(length=100), nullable=True),
        sa.Column('model_year', sa.Integer(), nullable=True),
        sa.Column('interior_colour', sa.String(length=50), nullable=True),
        sa.Column('exterior_colour', sa.String(length=50), nullable=True),
        sa.Column('gear_box', sa.String(length=50), nullable=True),
        sa.Column('car_type', sa.String(length=50), nullable=True),
        sa.Column('fuel_tank', sa.String(length=50), nullable=True),
        sa.Column('steering_side', sa.String(length=10), nullable=True),
        sa.Column('export_to', sa.String(length=100), nullable=True),
        sa.Column('export_to_country', sa.String(length=100), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('selling_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('cost_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('not_converted_reason', sa.Text(), nullable=True),
        sa.Column('assigned_to', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('finance_approved', sa.Boolean(), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('commission_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_leads_customer_id'), 'leads', ['customer_id'], unique=False)
    op.create_index(op.f('ix_leads_status'), 'leads', ['status'], unique=False)
    op.create_index(op.f('ix_leads_assigned_to'), 'leads', ['assigned_to'], unique=False)
    op.create_index(op.f('ix_leads_is_active'), 'leads', ['is_active'], unique=False)
    op.create_index(op.f('ix_leads_updated_at'), 'leads', ['updated_at'], unique=False)

    op.create_table(
        'category_limits',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category', lead_category, nullable=False),
        sa.Column('limit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'category', name='uq_category_limits_user_category', create_type=False),
    )
    op.create_index(op.f('ix_category_limits_user_id'), 'category_limits', ['user_id'], unique=False)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event', sa.String(length=100), nullable=False),
        sa.Column('actor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_audit_log_event'), 'audit_log', ['event'], unique=False)
    op.create_index(op.f('ix_audit_log_actor_id'), 'audit_log', ['actor_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_audit_log_actor_id'), table_name='audit_log', create_type=False)
    op.drop_index(op.f('ix_audit_log_event'), table_name='audit_log', create_type=False)
    op.drop_table('audit_log')
    op.drop_index(op.f('ix_category_limits_user_id'), table_name='category_limits', create_type=False)
    op.drop_table('category_limits')
    for index in ('updated_at', 'is_active', 'assigned_to', 'status', 'customer_id'):
        op.drop_index(op.f(f'ix_leads_{index}'), table_name='leads', create_type=False)
    op.drop_table('leads')
    op.drop_index(op.f('ix_customers_email'), table_name='customers', create_type=False)
    op.drop_table('customers')
    op.drop_index(op.f('ix_users_email'), table_name='users', create_type=False)
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (lead_category, lead_priority, lead_status, customer_status, user_role):
        enum_type.drop(bind, checkfirst=True)
