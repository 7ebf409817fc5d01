"""Initial schema: users, tasks, task tags and sessions

Revision ID: 3f1c9a7d2b40
Revises: 
Create Date: 2026-10-19 09:12:44.518302

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a7d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table(
        'task',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_task_due_date', 'task', ['due_date'], unique=False)
    op.create_index('ix_task_is_completed', 'task', ['is_completed'], unique=False)
    op.create_index('ix_task_user_id', 'task', ['user_id'], unique=False)
    op.create_index('ix_task_user_status', 'task', ['user_id', 'status'], unique=False)

    op.create_table(
        'task_tag',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['task.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_task_tag_name', 'task_tag', ['name'], unique=False)
    op.create_index('ix_task_tag_task_id', 'task_tag', ['task_id'], unique=False)

    op.create_table(
        'session_record',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sid', sa.String(length=64), nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_session_record_expires_at', 'session_record', ['expires_at'], unique=False)
    op.create_index('ix_session_record_sid', 'session_record', ['sid'], unique=True)


def downgrade():
    op.drop_index('ix_session_record_sid', table_name='session_record')
    op.drop_index('ix_session_record_expires_at', table_name='session_record')
    op.drop_table('session_record')
    op.drop_index('ix_task_tag_task_id', table_name='task_tag')
    op.drop_index('ix_task_tag_name', table_name='task_tag')
    op.drop_table('task_tag')
    op.drop_index('ix_task_user_status', table_name='task')
    op.drop_index('ix_task_user_id', table_name='task')
    op.drop_index('ix_task_is_completed', table_name='task')
    op.drop_index('ix_task_due_date', table_name='task')
    op.drop_table('task')
    op.drop_index('ix_user_email', table_name='user')
    op.drop_table('user')
