"""Initial RentDesk schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

All 15 tables. Money as INTEGER CENTS (BIGINT), enums store lowercase values.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB()

NOTICE_TYPES = (
    'late_rent', 'noise_complaint', 'inspection', 'lease_violation', 'eviction',
    'rent_increase', 'maintenance', 'parking_violation', 'pet_violation',
    'utility_shutdown', 'cleanliness', 'custom',
    'invitation_sent', 'lease_received', 'lease_completed', 'invoice_sent',
    'payment_received', 'payment_successful',
)

AUDIT_ACTIONS = (
    'invitation_sent', 'invitation_responded', 'application_submitted',
    'application_decided', 'lease_sent', 'lease_submitted', 'lease_decided',
    'invoice_created', 'payment_completed', 'lease_started', 'stage_changed',
)

ENUM_TYPES = (
    'auditaction', 'messagestatus', 'renterstage', 'paymentstatus', 'paymenttype',
    'invoicestatus', 'notificationtype', 'noticestatus', 'noticetype', 'leasestatus',
    'leasedecision', 'leasedocumentstatus', 'applicationstatus', 'invitationstatus',
    'propertystatus', 'propertytype', 'userrole',
)


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('role', sa.Enum('landlord', 'renter', 'admin', name='userrole'), nullable=False),
        sa.Column('current_property_id', UUID, nullable=True),
        sa.Column('current_property_details', JSONB, nullable=True),
        *_timestamps(),
    )

    # === RENTER PROFILES ===
    op.create_table(
        'renter_profiles',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('user_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('current_address', JSONB, nullable=True),
        sa.Column('employment', JSONB, nullable=True),
        sa.Column('rent_history', JSONB, nullable=True),
        sa.Column('references', JSONB, nullable=True),
        sa.Column('emergency_contact', JSONB, nullable=True),
        *_timestamps(),
    )

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('street', sa.String(255), nullable=False),
        sa.Column('unit', sa.String(50), nullable=True),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(50), nullable=False),
        sa.Column('country', sa.String(50), server_default='USA'),
        sa.Column('postal_code', sa.String(20), nullable=False),
        sa.Column(
            'property_type',
            sa.Enum('apartment', 'house', 'condo', 'townhouse', 'other', name='propertytype'),
            nullable=False,
        ),
        sa.Column('bedrooms', sa.Integer(), server_default='1'),
        sa.Column('bathrooms', sa.Float(), server_default='1'),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amenities', JSONB, nullable=True),
        sa.Column('images', JSONB, nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('security_deposit_cents', sa.BigInteger(), server_default='0'),
        sa.Column('application_fee_cents', sa.BigInteger(), server_default='0'),
        sa.Column('pet_allowed', sa.Boolean(), server_default=sa.false()),
        sa.Column('pet_fee_cents', sa.BigInteger(), server_default='0'),
        sa.Column('pet_restrictions', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('available', 'occupied', 'maintenance', name='propertystatus'),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
        sa.CheckConstraint('monthly_rent_cents >= 0', name='ck_property_rent_non_negative'),
    )

    # users.current_property_id closes the users <-> properties cycle
    op.create_foreign_key(
        'fk_users_current_property_id',
        'users', 'properties',
        ['current_property_id'], ['id'],
        ondelete='SET NULL',
    )

    # === INVITATIONS ===
    op.create_table(
        'invitations',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'declined', 'expired', name='invitationstatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('invited_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === APPLICATIONS ===
    op.create_table(
        'applications',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('invitation_id', UUID, sa.ForeignKey('invitations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('employment_company', sa.String(255), nullable=True),
        sa.Column('employment_job_title', sa.String(255), nullable=True),
        sa.Column('employment_monthly_income_cents', sa.BigInteger(), nullable=True),
        sa.Column('documents', JSONB, nullable=True),
        sa.Column(
            'status',
            sa.Enum('submitted', 'pending', 'approved', 'rejected', name='applicationstatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === PDF TEMPLATES ===
    op.create_table(
        'pdf_templates',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('template_type', sa.String(100), nullable=False, index=True),
        sa.Column('region', sa.String(100), nullable=True, index=True),
        sa.Column('url', sa.String(1024), nullable=False),
        sa.Column('thumbnail_url', sa.String(1024), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
    )

    # === LEASE DOCUMENTS ===
    op.create_table(
        'lease_documents',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('template_id', UUID, sa.ForeignKey('pdf_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('template_name', sa.String(255), nullable=True),
        sa.Column('original_template_url', sa.String(1024), nullable=False),
        sa.Column('filled_pdf_url', sa.String(1024), nullable=True),
        sa.Column('field_values', JSONB, nullable=True),
        sa.Column(
            'status',
            sa.Enum('draft', 'sent', 'renter_completed', 'accepted', 'rejected', name='leasedocumentstatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('landlord_action', sa.Enum('accept', 'reject', name='leasedecision'), nullable=True),
        sa.Column('renter_completed_at', sa.DateTime(), nullable=True),
        sa.Column('landlord_reviewed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === LEASES ===
    op.create_table(
        'leases',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('lease_document_id', UUID, sa.ForeignKey('lease_documents.id', ondelete='SET NULL'), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('security_deposit_cents', sa.BigInteger(), server_default='0'),
        sa.Column(
            'status',
            sa.Enum('draft', 'pending', 'active', 'completed', 'terminated', name='leasestatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('landlord_signed', sa.Boolean(), server_default=sa.false()),
        sa.Column('landlord_signed_at', sa.DateTime(), nullable=True),
        sa.Column('renter_signed', sa.Boolean(), server_default=sa.false()),
        sa.Column('renter_signed_at', sa.DateTime(), nullable=True),
        sa.Column('co_signer_required', sa.Boolean(), server_default=sa.false()),
        sa.Column('co_signer_signed', sa.Boolean(), server_default=sa.false()),
        sa.Column('co_signer_signed_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('end_date >= start_date', name='ck_lease_dates_ordered'),
    )
    op.create_index('ix_leases_property_renter_status', 'leases', ['property_id', 'renter_email', 'status'])

    # === NOTICES ===
    op.create_table(
        'notices',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('type', sa.Enum(*NOTICE_TYPES, name='noticetype'), nullable=False, index=True),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('renter_email', sa.String(255), nullable=True, index=True),
        sa.Column('renter_user_id', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('lease_document_id', UUID, nullable=True, index=True),
        sa.Column('invoice_id', UUID, nullable=True),
        sa.Column('invitation_id', UUID, nullable=True),
        sa.Column('status', sa.Enum('active', 'deleted', name='noticestatus'), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === NOTIFICATIONS ===
    op.create_table(
        'notifications',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column(
            'type',
            sa.Enum(
                'application_submitted', 'application_approved', 'application_rejected',
                'invitation_sent', 'invitation_accepted', 'invitation_declined', 'tenant_moved_in',
                name='notificationtype',
            ),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('data', JSONB, nullable=True),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
    )

    # === INVOICES ===
    op.create_table(
        'invoices',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('renter_user_id', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('monthly_rent_cents', sa.BigInteger(), server_default='0'),
        sa.Column('security_deposit_cents', sa.BigInteger(), server_default='0'),
        sa.Column('application_fee_cents', sa.BigInteger(), server_default='0'),
        sa.Column('pet_fee_cents', sa.BigInteger(), server_default='0'),
        sa.Column('include_pet_fee', sa.Boolean(), server_default=sa.false()),
        sa.Column(
            'status',
            sa.Enum('sent', 'pending', 'overdue', 'partial', 'paid', 'cancelled', name='invoicestatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('property_details', JSONB, nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('notice_id', UUID, nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True, index=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount_cents >= 0', name='ck_invoice_amount_non_negative'),
    )

    # === RENT PAYMENTS ===
    op.create_table(
        'rent_payments',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('invoice_id', UUID, sa.ForeignKey('invoices.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('lease_id', UUID, sa.ForeignKey('leases.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column(
            'payment_type',
            sa.Enum('monthly_rent', 'security_deposit', 'application_fee', 'pet_fee', name='paymenttype'),
            nullable=False,
        ),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'overdue', 'partial', name='paymentstatus'),
            nullable=False,
            index=True,
        ),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        *_timestamps(),
    )

    # === RENTER STATUSES ===
    op.create_table(
        'renter_statuses',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('renter_name', sa.String(255), nullable=True),
        sa.Column(
            'status',
            sa.Enum(
                'invite', 'application', 'lease', 'lease_rejected', 'accepted', 'payment', 'leased',
                name='renterstage',
            ),
            nullable=False,
            index=True,
        ),
        sa.Column('invitation_id', UUID, nullable=True),
        sa.Column('application_id', UUID, nullable=True),
        sa.Column('lease_document_id', UUID, nullable=True),
        sa.Column('lease_id', UUID, nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        # One pipeline row per (property, renter)
        sa.UniqueConstraint('property_id', 'renter_email', name='uq_renter_status_property_email'),
    )

    # === LANDLORD MESSAGES ===
    op.create_table(
        'landlord_messages',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('renter_email', sa.String(255), nullable=False, index=True),
        sa.Column('renter_user_id', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('landlord_id', UUID, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', UUID, sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('lease_id', UUID, sa.ForeignKey('leases.id', ondelete='SET NULL'), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('files', JSONB, nullable=True),
        sa.Column(
            'status',
            sa.Enum('unread', 'read', 'deleted', name='messagestatus'),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )

    # === AUDIT LOG (immutable) ===
    op.create_table(
        'audit_log',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('user_id', UUID, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', sa.Enum(*AUDIT_ACTIONS, name='auditaction'), nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', UUID, nullable=False),
        sa.Column('details', JSONB, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_audit_log_resource', 'audit_log', ['resource_type', 'resource_id'])


def downgrade() -> None:
    op.drop_index('ix_audit_log_resource')
    op.drop_table('audit_log')
    op.drop_table('landlord_messages')
    op.drop_table('renter_statuses')
    op.drop_table('rent_payments')
    op.drop_table('invoices')
    op.drop_table('notifications')
    op.drop_table('notices')
    op.drop_index('ix_leases_property_renter_status')
    op.drop_table('leases')
    op.drop_table('lease_documents')
    op.drop_table('pdf_templates')
    op.drop_table('applications')
    op.drop_table('invitations')
    op.drop_constraint('fk_users_current_property_id', 'users', type_='foreignkey')
    op.drop_table('properties')
    op.drop_table('renter_profiles')
    op.drop_table('users')

    # Drop enums
    for enum_name in ENUM_TYPES:
        op.execute(f'DROP TYPE IF EXISTS {enum_name}')
