"""Initial schema: users, categories, topics, posts and their bookkeeping tables

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('moderator', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_private_messages', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'category',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False, server_default=''),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('topic_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('secure', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('auto_close_days', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_category_name'), 'category', ['name'], unique=True)

    op.create_table(
        'topic',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('archetype', sa.String(), nullable=False, server_default='regular'),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('last_post_user_id', sa.Integer(), nullable=True),
        sa.Column('featured_user1_id', sa.Integer(), nullable=True),
        sa.Column('featured_user2_id', sa.Integer(), nullable=True),
        sa.Column('featured_user3_id', sa.Integer(), nullable=True),
        sa.Column('featured_user4_id', sa.Integer(), nullable=True),
        sa.Column('posts_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('highest_post_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('like_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('star_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('moderator_posts_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('visible', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('closed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('pinned_at', sa.DateTime(), nullable=True),
        sa.Column('has_best_of', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('percent_rank', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('bumped_at', sa.DateTime(), nullable=True),
        sa.Column('last_posted_at', sa.DateTime(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('meta_data', sa.JSON(), nullable=True),
        sa.Column('auto_close_at', sa.DateTime(), nullable=True),
        sa.Column('auto_close_user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['category_id'], ['category.id'], ),
        sa.ForeignKeyConstraint(['last_post_user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['featured_user1_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['featured_user2_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['featured_user3_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['featured_user4_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['auto_close_user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_topic_archetype'), 'topic', ['archetype'], unique=False)
    op.create_index(op.f('ix_topic_category_id'), 'topic', ['category_id'], unique=False)
    op.create_index(op.f('ix_topic_bumped_at'), 'topic', ['bumped_at'], unique=False)
    op.create_index(op.f('ix_topic_created_at'), 'topic', ['created_at'], unique=False)

    op.create_table(
        'post',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('post_number', sa.Integer(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('raw', sa.Text(), nullable=False),
        sa.Column('post_type', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('like_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_version_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_post_topic_id'), 'post', ['topic_id'], unique=False)
    op.create_index(op.f('ix_post_user_id'), 'post', ['user_id'], unique=False)

    op.create_table(
        'topic_user',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('starred', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('starred_at', sa.DateTime(), nullable=True),
        sa.Column('unstarred_at', sa.DateTime(), nullable=True),
        sa.Column('posted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_read_post_number', sa.Integer(), nullable=True),
        sa.Column('seen_post_count', sa.Integer(), nullable=True),
        sa.Column('total_msecs_viewed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_visited_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.PrimaryKeyConstraint('user_id', 'topic_id')
    )

    op.create_table(
        'topic_link',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('domain', sa.String(), nullable=False),
        sa.Column('internal', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.ForeignKeyConstraint(['post_id'], ['post.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_topic_link_topic_id'), 'topic_link', ['topic_id'], unique=False)

    op.create_table(
        'topic_allowed_user',
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('topic_id', 'user_id')
    )

    op.create_table(
        'invite',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invite_key', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('invited_by_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('redeemed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['invited_by_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invite_key')
    )
    op.create_index(op.f('ix_invite_email'), 'invite', ['email'], unique=False)

    op.create_table(
        'topic_invite',
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('invite_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.ForeignKeyConstraint(['invite_id'], ['invite.id'], ),
        sa.PrimaryKeyConstraint('topic_id', 'invite_id')
    )

    op.create_table(
        'post_action',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('post_action_type_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['post.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('post_id', 'user_id', 'post_action_type_id', name='uq_post_action_post_user_type')
    )
    op.create_index(op.f('ix_post_action_post_id'), 'post_action', ['post_id'], unique=False)

    op.create_table(
        'notification',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('notification_type', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=True),
        sa.Column('post_number', sa.Integer(), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notification_user_id'), 'notification', ['user_id'], unique=False)

    op.create_table(
        'user_action',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('action_type', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('acting_user_id', sa.Integer(), nullable=True),
        sa.Column('target_topic_id', sa.Integer(), nullable=True),
        sa.Column('target_post_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['acting_user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['target_topic_id'], ['topic.id'], ),
        sa.ForeignKeyConstraint(['target_post_id'], ['post.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_action_user_id'), 'user_action', ['user_id'], unique=False)

    op.create_table(
        'topic_revision',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('modifications', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['topic_id'], ['topic.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_topic_revision_topic_id'), 'topic_revision', ['topic_id'], unique=False)

    op.create_table(
        'scheduled_job',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('job_name', sa.String(), nullable=False),
        sa.Column('args', sa.JSON(), nullable=True),
        sa.Column('run_at', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('error', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_scheduled_job_job_name'), 'scheduled_job', ['job_name'], unique=False)
    op.create_index(op.f('ix_scheduled_job_run_at'), 'scheduled_job', ['run_at'], unique=False)
    op.create_index(op.f('ix_scheduled_job_status'), 'scheduled_job', ['status'], unique=False)

    op.create_table(
        'email_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email_type', sa.String(), nullable=False),
        sa.Column('to_address', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('post_id', sa.Integer(), nullable=True),
        sa.Column('invite_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.ForeignKeyConstraint(['post_id'], ['post.id'], ),
        sa.ForeignKeyConstraint(['invite_id'], ['invite.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'rate_limit_event',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_rate_limit_event_key'), 'rate_limit_event', ['key'], unique=False)
    op.create_index(op.f('ix_rate_limit_event_created_at'), 'rate_limit_event', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('rate_limit_event')
    op.drop_table('email_log')
    op.drop_table('scheduled_job')
    op.drop_table('topic_revision')
    op.drop_table('user_action')
    op.drop_table('notification')
    op.drop_table('post_action')
    op.drop_table('topic_invite')
    op.drop_table('invite')
    op.drop_table('topic_allowed_user')
    op.drop_table('topic_link')
    op.drop_table('topic_user')
    op.drop_table('post')
    op.drop_table('topic')
    op.drop_table('category')
    op.drop_table('user')
