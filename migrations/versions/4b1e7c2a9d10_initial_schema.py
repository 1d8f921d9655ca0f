"""initial_schema

Revision ID: 4b1e7c2a9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1e7c2a9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone_number', sa.String(30), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='CUSTOMER'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_phone_number', 'users', ['phone_number'])
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'contractor_profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('business_name', sa.String(255), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('specialties', sa.JSON(), nullable=False),
        sa.Column('preferred_job_types', sa.JSON(), nullable=False),
        sa.Column('service_zip_codes', sa.JSON(), nullable=False),
        sa.Column('service_radius', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('minimum_job_value', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('accept_auto_assignment', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('auto_call_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('years_in_business', sa.Integer(), nullable=True),
        sa.Column('bonded_and_insured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('preferred_contact_time', sa.String(50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index(
        'ix_contractor_profiles_accept_auto_assignment',
        'contractor_profiles',
        ['accept_auto_assignment'],
    )

    op.create_table(
        'availability_slots',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('contractor_id', sa.UUID(), nullable=False),
        sa.Column('day_of_week', sa.String(10), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['contractor_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_availability_slots_contractor_id', 'availability_slots', ['contractor_id'])
    op.create_index('idx_availability_contractor_day', 'availability_slots', ['contractor_id', 'day_of_week'])

    op.create_table(
        'issues',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('priority', sa.String(20), nullable=False, server_default='NORMAL'),
        sa.Column('status', sa.String(30), nullable=False, server_default='SUBMITTED'),
        sa.Column('zip_code', sa.String(10), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_issues_customer_id', 'issues', ['customer_id'])
    op.create_index('ix_issues_status', 'issues', ['status'])
    op.create_index('idx_issue_status_created', 'issues', ['status', 'created_at'])

    op.create_table(
        'enriched_issues',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('issue_id', sa.UUID(), nullable=False),
        sa.Column('identified_problem', sa.Text(), nullable=False),
        sa.Column('repair_solution', sa.Text(), nullable=False),
        sa.Column('difficulty_level', sa.String(20), nullable=True),
        sa.Column('estimated_time_hours', sa.Float(), nullable=True),
        sa.Column('required_items', sa.JSON(), nullable=False),
        sa.Column('total_estimated_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('total_quoted_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('questions_for_user', sa.JSON(), nullable=False),
        sa.Column('contractor_checklist', sa.JSON(), nullable=False),
        sa.Column('claimed_by_contractor_id', sa.UUID(), nullable=True),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('offer_state', sa.String(20), nullable=False, server_default='UNCLAIMED'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['claimed_by_contractor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('issue_id'),
    )
    op.create_index('ix_enriched_issues_claimed_by_contractor_id', 'enriched_issues', ['claimed_by_contractor_id'])
    op.create_index('ix_enriched_issues_offer_state', 'enriched_issues', ['offer_state'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('issue_id', sa.UUID(), nullable=False),
        sa.Column('contractor_id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('estimated_duration', sa.Integer(), nullable=False, server_default='120'),
        sa.Column('status', sa.String(20), nullable=False, server_default='SCHEDULED'),
        sa.Column('quoted_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('final_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('contractor_notes', sa.Text(), nullable=True),
        sa.Column('customer_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id']),
        sa.ForeignKeyConstraint(['contractor_id'], ['users.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_appointments_issue_id', 'appointments', ['issue_id'])
    op.create_index('ix_appointments_customer_id', 'appointments', ['customer_id'])
    op.create_index(
        'idx_appointment_contractor_status_date',
        'appointments',
        ['contractor_id', 'status', 'scheduled_date'],
    )

    op.create_table(
        'offer_calls',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('enriched_issue_id', sa.UUID(), nullable=False),
        sa.Column('contractor_id', sa.UUID(), nullable=False),
        sa.Column('phone_number', sa.String(30), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('call_id', sa.String(255), nullable=True),
        sa.Column('outcome', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('decline_reason', sa.Text(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['enriched_issue_id'], ['enriched_issues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contractor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_offer_calls_contractor_id', 'offer_calls', ['contractor_id'])
    op.create_index('ix_offer_calls_call_id', 'offer_calls', ['call_id'])
    op.create_index('idx_offer_call_job_outcome', 'offer_calls', ['enriched_issue_id', 'outcome'])
    op.create_index(
        'idx_offer_call_unique', 'offer_calls', ['enriched_issue_id', 'contractor_id'], unique=True
    )

    # Transactional outbox for post-commit notifications and dispatch
    op.create_table(
        'outbox_events',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('aggregate_id', sa.String(255), nullable=False),
        sa.Column('event_data', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('retry_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_retries', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_outbox_events_status', 'outbox_events', ['status'])
    op.create_index('idx_outbox_events_type', 'outbox_events', ['event_type'])
    op.create_index('idx_outbox_events_created', 'outbox_events', ['created_at'])
    op.create_index('idx_outbox_events_aggregate', 'outbox_events', ['aggregate_id'])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table('outbox_events')
    op.drop_table('offer_calls')
    op.drop_table('appointments')
    op.drop_table('enriched_issues')
    op.drop_table('issues')
    op.drop_table('availability_slots')
    op.drop_table('contractor_profiles')
    op.drop_table('users')
