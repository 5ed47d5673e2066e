"""initial schema: users, records, settings, debt, goals, motivation logs

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('is_superuser', sa.Boolean, nullable=False),
        sa.Column('is_verified', sa.Boolean, nullable=False),
        sa.Column('full_name', sa.String, nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'financial_records',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('kind', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.Float, nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('timestamp', sa.BigInteger, nullable=False),
    )
    op.create_index('ix_financial_records_owner_id', 'financial_records', ['owner_id'])
    op.create_index('ix_financial_records_timestamp', 'financial_records', ['timestamp'])

    op.create_table(
        'fixed_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('fixed_salary', sa.Float, nullable=False),
        sa.Column('fixed_debt', sa.Float, nullable=False),
        sa.Column('fixed_savings', sa.Float, nullable=False),
        sa.Column('updated_at', sa.BigInteger, nullable=True),
    )

    op.create_table(
        'debt_status',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('initial_debt', sa.Float, nullable=False),
        sa.Column('current_debt', sa.Float, nullable=False),
        sa.Column('last_updated', sa.BigInteger, nullable=False),
    )

    op.create_table(
        'repayment_log',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event', sa.Enum('init', 'repayment', name='debtevent'), nullable=False),
        sa.Column('amount', sa.Float, nullable=False),
        sa.Column('remaining_debt', sa.Float, nullable=False),
        sa.Column('timestamp', sa.BigInteger, nullable=False),
    )
    op.create_index('ix_repayment_log_owner_id', 'repayment_log', ['owner_id'])
    op.create_index('ix_repayment_log_timestamp', 'repayment_log', ['timestamp'])

    op.create_table(
        'goals',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('status', sa.Enum('in_progress', 'done', 'failed', name='goalstatus'), nullable=False),
        sa.Column('subgoals', sa.JSON, nullable=False),
        sa.Column('created_at', sa.BigInteger, nullable=False),
    )
    op.create_index('ix_goals_owner_id', 'goals', ['owner_id'])

    # goal_id is a weak reference, no foreign key on purpose
    op.create_table(
        'motivation_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('goal_id', sa.Uuid(), nullable=True),
        sa.Column('goal_title', sa.String(length=200), nullable=True),
        sa.Column('score', sa.Integer, nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('timestamp', sa.BigInteger, nullable=False),
    )
    op.create_index('ix_motivation_logs_owner_id', 'motivation_logs', ['owner_id'])
    op.create_index('ix_motivation_logs_timestamp', 'motivation_logs', ['timestamp'])

def downgrade():
    op.drop_table('motivation_logs')
    op.drop_table('goals')
    op.drop_table('repayment_log')
    op.drop_table('debt_status')
    op.drop_table('fixed_settings')
    op.drop_table('financial_records')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    sa.Enum(name='goalstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='debtevent').drop(op.get_bind(), checkfirst=True)
