"""initial_schema

Revision ID: 7a3c1e5d9b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '7a3c1e5d9b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ITEMS = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _identity():
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('uuid', sa.Uuid(), nullable=False),
    ]


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _company():
    return sa.Column(
        'company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False
    )


def _fk(name: str, target: str, ondelete: str, nullable: bool = True):
    return sa.Column(name, sa.Integer(), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def _indexes(table: str, *columns: str) -> None:
    for column in columns:
        op.create_index(op.f(f'ix_{table}_{column}'), table, [column], unique=False)


def upgrade() -> None:
    """Create the full OneFlow schema."""

    op.create_table('companies',
        *_identity(),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )

    op.create_table('users',
        *_identity(),
        _company(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    _indexes('users', 'company_id')

    op.create_table('contacts',
        *_identity(),
        _company(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('contacts', 'company_id')

    op.create_table('projects',
        *_identity(),
        _company(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _fk('client_id', 'contacts.id', 'SET NULL'),
        _fk('manager_id', 'users.id', 'SET NULL'),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('budget', sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('projects', 'company_id', 'client_id', 'manager_id')

    op.create_table('tasks',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'CASCADE', nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        _fk('assignee_id', 'users.id', 'SET NULL'),
        sa.Column('due_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('tasks', 'company_id', 'project_id', 'assignee_id')

    op.create_table('task_assignments',
        *_identity(),
        _fk('task_id', 'tasks.id', 'CASCADE', nullable=False),
        _fk('user_id', 'users.id', 'CASCADE', nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
        sa.UniqueConstraint('task_id', 'user_id', name='uq_task_assignments_task_user'),
    )
    _indexes('task_assignments', 'task_id', 'user_id')

    op.create_table('timesheets',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'CASCADE', nullable=False),
        _fk('task_id', 'tasks.id', 'SET NULL'),
        _fk('user_id', 'users.id', 'CASCADE', nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('hours', sa.Numeric(5, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('billable', sa.Boolean(), nullable=False),
        sa.Column('cost_rate', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('timesheets', 'company_id', 'project_id', 'task_id', 'user_id')

    op.create_table('sales_orders',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'CASCADE'),
        _fk('client_id', 'contacts.id', 'SET NULL'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('items', ITEMS, nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('sales_orders', 'company_id', 'project_id', 'client_id')

    op.create_table('invoices',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'SET NULL'),
        _fk('sales_order_id', 'sales_orders.id', 'SET NULL'),
        _fk('client_id', 'contacts.id', 'SET NULL'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('items', ITEMS, nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('invoices', 'company_id', 'project_id', 'sales_order_id', 'client_id')

    op.create_table('purchase_orders',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'SET NULL'),
        _fk('vendor_id', 'contacts.id', 'SET NULL'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('items', ITEMS, nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('purchase_orders', 'company_id', 'project_id', 'vendor_id')

    op.create_table('vendor_bills',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'SET NULL'),
        _fk('purchase_order_id', 'purchase_orders.id', 'SET NULL'),
        _fk('vendor_id', 'contacts.id', 'SET NULL'),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('items', ITEMS, nullable=False),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('vendor_bills', 'company_id', 'project_id', 'purchase_order_id', 'vendor_id')

    op.create_table('expenses',
        *_identity(),
        _company(),
        _fk('project_id', 'projects.id', 'CASCADE', nullable=False),
        _fk('user_id', 'users.id', 'SET NULL'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('billable', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('receipt_url', sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uuid'),
    )
    _indexes('expenses', 'company_id', 'project_id', 'user_id')


def downgrade() -> None:
    """Drop the full OneFlow schema."""
    for table in (
        'expenses',
        'vendor_bills',
        'purchase_orders',
        'invoices',
        'sales_orders',
        'timesheets',
        'task_assignments',
        'tasks',
        'projects',
        'contacts',
        'users',
        'companies',
    ):
        op.drop_table(table)
