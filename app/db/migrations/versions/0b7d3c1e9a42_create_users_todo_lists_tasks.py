"""create_users_todo_lists_tasks

Revision ID: 0b7d3c1e9a42
Revises:
Create Date: 2026-10-19 10:12:03.418552
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from app.config import get_settings


# revision identifiers, used by Alembic.
revision: str = '0b7d3c1e9a42'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = get_settings().DB_SCHEMA

task_status = postgresql.ENUM('pending', 'in_progress', 'completed', name='task_status', schema=SCHEMA, create_type=False)
task_priority = postgresql.ENUM('low', 'medium', 'high', name='task_priority', schema=SCHEMA, create_type=False)


def upgrade() -> None:
    # 1. 枚举类型
    task_status.create(op.get_bind(), checkfirst=True)
    task_priority.create(op.get_bind(), checkfirst=True)

    # 2. users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment='登录邮箱（小写归一化）'),
        sa.Column('name', sa.String(length=64), nullable=False, comment='显示名称'),
        sa.Column('password_hash', sa.String(length=256), nullable=False, comment='密码哈希'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        schema=SCHEMA,
    )

    # 3. todo_lists：随用户级联删除
    op.create_table(
        'todo_lists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False, comment='清单名称'),
        sa.Column('description', sa.Text(), nullable=True, comment='清单描述'),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='所属用户'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['user_id'], [f'{SCHEMA}.users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        schema=SCHEMA,
    )
    op.create_index(f'ix_{SCHEMA}_todo_lists_user_id', 'todo_lists', ['user_id'], schema=SCHEMA)

    # 4. tasks：随清单级联删除，is_deleted 为软删除标记
    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False, comment='任务标题'),
        sa.Column('description', sa.Text(), nullable=True, comment='任务描述'),
        sa.Column('status', task_status, server_default='pending', nullable=False, comment='状态: pending/in_progress/completed'),
        sa.Column('priority', task_priority, server_default='medium', nullable=False, comment='优先级: low/medium/high'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=False, comment='截止时间'),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.false(), nullable=False, comment='软删除标记'),
        sa.Column('todo_list_id', sa.Uuid(), nullable=False, comment='所属清单'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['todo_list_id'], [f'{SCHEMA}.todo_lists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        schema=SCHEMA,
    )
    op.create_index('ix_tasks_list_due', 'tasks', ['todo_list_id', 'is_deleted', 'due_date'], schema=SCHEMA)


def downgrade() -> None:
    op.drop_index('ix_tasks_list_due', table_name='tasks', schema=SCHEMA)
    op.drop_table('tasks', schema=SCHEMA)
    op.drop_index(f'ix_{SCHEMA}_todo_lists_user_id', table_name='todo_lists', schema=SCHEMA)
    op.drop_table('todo_lists', schema=SCHEMA)
    op.drop_table('users', schema=SCHEMA)
    task_priority.drop(op.get_bind(), checkfirst=True)
    task_status.drop(op.get_bind(), checkfirst=True)
