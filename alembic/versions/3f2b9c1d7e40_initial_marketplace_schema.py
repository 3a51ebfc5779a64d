"""initial_marketplace_schema

Revision ID: 3f2b9c1d7e40
Revises:
Create Date: 2026-10-18 09:12:41.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2b9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _money(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=15, scale=2), nullable=nullable)


def upgrade() -> None:
    """
    Create the marketplace schema.

    Creates:
    - users, properties (listings with moderation fields)
    - tenants, lease_agreements, rent_payments (landlord bookkeeping)
    - bookings, reviews (guest side)
    - admin_actions, platform_settings (administration)
    """
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('auth_user_id', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=5), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_auth_user_id', 'users', ['auth_user_id'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('host_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=False),
        _money('price'),
        sa.Column('property_type', sa.String(length=50), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=8), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_host_id', 'properties', ['host_id'])
    op.create_index('ix_properties_status', 'properties', ['status'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('landlord_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('tenant_name', sa.String(length=255), nullable=True),
        sa.Column('tenant_phone', sa.String(length=50), nullable=True),
        sa.Column('tenant_email', sa.String(length=255), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=255), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=50), nullable=True),
        sa.Column('emergency_contact_relationship', sa.String(length=100), nullable=True),
        sa.Column('lease_start_date', sa.Date(), nullable=False),
        sa.Column('lease_end_date', sa.Date(), nullable=False),
        _money('monthly_rent'),
        _money('security_deposit'),
        sa.Column('status', sa.String(length=6), nullable=False),
        sa.Column('move_in_date', sa.Date(), nullable=True),
        sa.Column('move_out_date', sa.Date(), nullable=True),
        sa.Column('move_in_condition_notes', sa.Text(), nullable=True),
        sa.Column('move_out_condition_notes', sa.Text(), nullable=True),
        sa.Column('move_in_photos', sa.JSON(), nullable=False),
        sa.Column('move_out_photos', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_property_id', 'tenants', ['property_id'])
    op.create_index('ix_tenants_landlord_id', 'tenants', ['landlord_id'])
    op.create_index('ix_tenants_user_id', 'tenants', ['user_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])

    op.create_table(
        'lease_agreements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('landlord_id', sa.Integer(), nullable=False),
        sa.Column('agreement_type', sa.String(length=14), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        _money('monthly_rent'),
        _money('security_deposit'),
        sa.Column('terms_and_conditions', sa.Text(), nullable=True),
        sa.Column('special_clauses', sa.Text(), nullable=True),
        sa.Column('utilities_included', sa.JSON(), nullable=False),
        sa.Column('tenant_responsibilities', sa.Text(), nullable=True),
        sa.Column('landlord_responsibilities', sa.Text(), nullable=True),
        sa.Column('rent_due_day', sa.Integer(), nullable=False),
        _money('late_fee_amount'),
        sa.Column('late_fee_grace_period', sa.Integer(), nullable=False),
        sa.Column('landlord_signed', sa.Boolean(), nullable=False),
        sa.Column('landlord_signature_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('tenant_signed', sa.Boolean(), nullable=False),
        sa.Column('tenant_signature_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('document_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=17), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lease_agreements_tenant_id', 'lease_agreements', ['tenant_id'])
    op.create_index('ix_lease_agreements_property_id', 'lease_agreements', ['property_id'])
    op.create_index('ix_lease_agreements_landlord_id', 'lease_agreements', ['landlord_id'])
    op.create_index('ix_lease_agreements_status', 'lease_agreements', ['status'])

    op.create_table(
        'rent_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('landlord_id', sa.Integer(), nullable=False),
        sa.Column('payment_month', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        _money('amount_due'),
        _money('amount_paid'),
        _money('late_fee'),
        sa.Column('payment_method', sa.String(length=13), nullable=True),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=7), nullable=False),
        sa.Column('is_late', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('receipt_url', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'payment_month', name='uq_rent_payment_tenant_month'),
    )
    op.create_index('ix_rent_payments_tenant_id', 'rent_payments', ['tenant_id'])
    op.create_index('ix_rent_payments_property_id', 'rent_payments', ['property_id'])
    op.create_index('ix_rent_payments_landlord_id', 'rent_payments', ['landlord_id'])
    op.create_index('ix_rent_payments_payment_month', 'rent_payments', ['payment_month'])
    op.create_index('ix_rent_payments_status', 'rent_payments', ['status'])
    op.create_index(
        'ix_rent_payments_landlord_month', 'rent_payments', ['landlord_id', 'payment_month']
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('guest_id', sa.Integer(), nullable=False),
        sa.Column('host_id', sa.Integer(), nullable=False),
        sa.Column('check_in', sa.Date(), nullable=False),
        sa.Column('check_out', sa.Date(), nullable=False),
        sa.Column('total_months', sa.Integer(), nullable=False),
        _money('monthly_rent'),
        sa.Column('commission_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        _money('subtotal'),
        _money('service_fee'),
        _money('total_amount'),
        sa.Column('status', sa.String(length=9), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('cancellation_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['guest_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['cancelled_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bookings_property_id', 'bookings', ['property_id'])
    op.create_index('ix_bookings_guest_id', 'bookings', ['guest_id'])
    op.create_index('ix_bookings_host_id', 'bookings', ['host_id'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_property_check_in', 'bookings', ['property_id', 'check_in'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_id', 'user_id', name='uq_review_booking_user'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
    )
    op.create_index('ix_reviews_booking_id', 'reviews', ['booking_id'])
    op.create_index('ix_reviews_property_id', 'reviews', ['property_id'])
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])

    op.create_table(
        'admin_actions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('admin_id', sa.Integer(), nullable=False),
        sa.Column('action_type', sa.String(length=100), nullable=False),
        sa.Column('target_type', sa.String(length=50), nullable=True),
        sa.Column('target_id', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=7), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_actions_admin_id', 'admin_actions', ['admin_id'])
    op.create_index('ix_admin_actions_action_type', 'admin_actions', ['action_type'])
    op.create_index('ix_admin_actions_target', 'admin_actions', ['target_type', 'target_id'])

    op.create_table(
        'platform_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=500), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_platform_settings_key', 'platform_settings', ['key'], unique=True)


def downgrade() -> None:
    """Drop the marketplace schema."""
    op.drop_table('platform_settings')
    op.drop_table('admin_actions')
    op.drop_table('reviews')
    op.drop_table('bookings')
    op.drop_table('rent_payments')
    op.drop_table('lease_agreements')
    op.drop_table('tenants')
    op.drop_table('properties')
    op.drop_table('users')
