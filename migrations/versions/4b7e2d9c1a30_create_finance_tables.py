"""create finance tables

Revision ID: 4b7e2d9c1a30
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e2d9c1a30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list:
    columns = [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if with_updated:
        columns.append(
            sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('activated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('country', sa.String(2), nullable=False, server_default='US'),
        sa.Column('date_format', sa.String(10), nullable=False, server_default='MM/DD/YYYY'),
        sa.Column('theme', sa.String(10), nullable=False, server_default='light'),
        *_timestamps(),
    )
    op.create_index('ix_users_expires_at', 'users', ['expires_at'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.String(30), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'name', name='uq_category_user_name'),
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_transactions_user_date', 'transactions', ['user_id', 'date'])
    op.create_index('ix_transactions_user_type_date', 'transactions', ['user_id', 'type', 'date'])
    op.create_index('ix_transactions_user_category_date', 'transactions', ['user_id', 'category_id', 'date'])

    op.create_table(
        'budgets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('total_budget', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'month', name='uq_budget_user_month'),
    )

    op.create_table(
        'category_budgets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('budget_id', sa.Integer(), nullable=False, index=True),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('target_amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('current_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('target_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('category', sa.String(20), nullable=False, server_default='other'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_goals_user_completed', 'goals', ['user_id', 'is_completed'])

    op.create_table(
        'recurring_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('frequency', sa.String(10), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('day_of_week', sa.SmallInteger(), nullable=True),
        sa.Column('day_of_month', sa.SmallInteger(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_processed', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('next_due', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index('ix_recurring_next_due_active', 'recurring_transactions', ['next_due', 'is_active'])


def downgrade() -> None:
    op.drop_index('ix_recurring_next_due_active', table_name='recurring_transactions')
    op.drop_table('recurring_transactions')
    op.drop_index('ix_goals_user_completed', table_name='goals')
    op.drop_table('goals')
    op.drop_table('category_budgets')
    op.drop_table('budgets')
    op.drop_index('ix_transactions_user_category_date', table_name='transactions')
    op.drop_index('ix_transactions_user_type_date', table_name='transactions')
    op.drop_index('ix_transactions_user_date', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('categories')
    op.drop_index('ix_users_expires_at', table_name='users')
    op.drop_table('users')
