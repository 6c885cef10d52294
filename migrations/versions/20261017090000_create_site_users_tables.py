"""创建站点、用户、成员关系、文章、站点选项、注册申请与用户偏好表

Revision ID: 20261017090000
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261017090000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'sites',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('domain', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('path', sa.String(length=100), nullable=False, server_default='/'),
        sa.Column('name', sa.String(length=200), nullable=False, server_default=''),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_login', sa.String(length=60), nullable=False),
        sa.Column('user_email', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('display_name', sa.String(length=250), nullable=False, server_default=''),
        sa.Column('first_name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_super_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_users_user_login', 'users', ['user_login'], unique=True)
    op.create_index('ix_users_user_email', 'users', ['user_email'])

    op.create_table(
        'site_memberships',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('site_id', sa.Integer(), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('site_id', 'user_id', name='uq_site_memberships_site_user'),
    )
    op.create_index('ix_site_memberships_site_id', 'site_memberships', ['site_id'])
    op.create_index('ix_site_memberships_user_id', 'site_memberships', ['user_id'])

    op.create_table(
        'membership_roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'membership_id',
            sa.Integer(),
            sa.ForeignKey('site_memberships.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('membership_id', 'role', name='uq_membership_roles_membership_role'),
    )
    op.create_index('ix_membership_roles_membership_id', 'membership_roles', ['membership_id'])
    op.create_index('ix_membership_roles_role', 'membership_roles', ['role'])

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('site_id', sa.Integer(), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_posts_site_id', 'posts', ['site_id'])
    op.create_index('ix_posts_author_id', 'posts', ['author_id'])
    op.create_index('ix_posts_status', 'posts', ['status'])

    op.create_table(
        'site_options',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('site_id', sa.Integer(), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False),
        sa.Column('option_name', sa.String(length=191), nullable=False),
        sa.Column('option_value', sa.Text(), nullable=False, server_default=''),
        sa.UniqueConstraint('site_id', 'option_name', name='uq_site_options_site_name'),
    )
    op.create_index('ix_site_options_site_id', 'site_options', ['site_id'])
    op.create_index('ix_site_options_option_name', 'site_options', ['option_name'])

    op.create_table(
        'signups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_login', sa.String(length=60), nullable=False, server_default=''),
        sa.Column('user_email', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('activation_key', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('meta', sa.Text(), nullable=False, server_default=''),
    )
    op.create_index('ix_signups_user_login', 'signups', ['user_login'])
    op.create_index('ix_signups_user_email', 'signups', ['user_email'])

    op.create_table(
        'user_meta',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('meta_key', sa.String(length=255), nullable=False),
        sa.Column('meta_value', sa.Text(), nullable=True),
        sa.UniqueConstraint('user_id', 'meta_key', name='uq_user_meta_user_key'),
    )
    op.create_index('ix_user_meta_user_id', 'user_meta', ['user_id'])
    op.create_index('ix_user_meta_meta_key', 'user_meta', ['meta_key'])


def downgrade() -> None:
    op.drop_table('user_meta')
    op.drop_table('signups')
    op.drop_table('site_options')
    op.drop_table('posts')
    op.drop_table('membership_roles')
    op.drop_table('site_memberships')
    op.drop_table('users')
    op.drop_table('sites')
