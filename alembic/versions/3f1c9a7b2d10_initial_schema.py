"""initial_schema

Revision ID: 3f1c9a7b2d10
Revises:
Create Date: 2026-10-17

Users and their social identities, conferences with favorites, dismissals and
issues, talks and submissions.
"""

revision = '3f1c9a7b2d10'
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


user_role = sa.Enum('REGULAR', 'ADMIN', name='userrole')
issue_reason = sa.Enum('SPAM', 'DUPLICATE', 'INCORRECT_INFO', 'OTHER', name='issuereason')
submission_response = sa.Enum('ACCEPTED', 'REJECTED', name='submissionresponse')


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('profile_intro', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('user_social',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('service', sa.String(length=50), nullable=False),
        sa.Column('social_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('service', 'social_id', name='uq_user_social_service_id')
    )
    op.create_index(op.f('ix_user_social_user_id'), 'user_social', ['user_id'], unique=False)

    op.create_table('conferences',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('cfp_url', sa.String(length=500), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('starts_at', sa.DateTime(), nullable=True),
        sa.Column('ends_at', sa.DateTime(), nullable=True),
        sa.Column('has_cfp', sa.Boolean(), nullable=False),
        sa.Column('cfp_starts_at', sa.DateTime(), nullable=True),
        sa.Column('cfp_ends_at', sa.DateTime(), nullable=True),
        sa.Column('speaker_package', sa.JSON(), nullable=True),
        sa.Column('is_shared', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_conferences_id'), 'conferences', ['id'], unique=False)
    op.create_index(op.f('ix_conferences_author_id'), 'conferences', ['author_id'], unique=False)
    op.create_index(op.f('ix_conferences_starts_at'), 'conferences', ['starts_at'], unique=False)
    op.create_index(op.f('ix_conferences_cfp_starts_at'), 'conferences', ['cfp_starts_at'], unique=False)
    op.create_index(op.f('ix_conferences_cfp_ends_at'), 'conferences', ['cfp_ends_at'], unique=False)

    for table in ('conference_favorites', 'conference_dismissals'):
        op.create_table(table,
            sa.Column('conference_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['conference_id'], ['conferences.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('conference_id', 'user_id')
        )

    op.create_table('conference_issues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('conference_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('reason', issue_reason, nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('closed_by', sa.Integer(), nullable=True),
        sa.Column('admin_note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['conference_id'], ['conferences.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['closed_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_conference_issues_id'), 'conference_issues', ['id'], unique=False)
    op.create_index(op.f('ix_conference_issues_conference_id'), 'conference_issues', ['conference_id'], unique=False)

    op.create_table('talks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_talks_id'), 'talks', ['id'], unique=False)
    op.create_index(op.f('ix_talks_author_id'), 'talks', ['author_id'], unique=False)

    op.create_table('submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('talk_id', sa.Integer(), nullable=False),
        sa.Column('conference_id', sa.Integer(), nullable=False),
        sa.Column('response', submission_response, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['talk_id'], ['talks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['conference_id'], ['conferences.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('talk_id', 'conference_id', name='uq_submission_talk_conference')
    )
    op.create_index(op.f('ix_submissions_id'), 'submissions', ['id'], unique=False)
    op.create_index(op.f('ix_submissions_talk_id'), 'submissions', ['talk_id'], unique=False)
    op.create_index(op.f('ix_submissions_conference_id'), 'submissions', ['conference_id'], unique=False)


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('submissions')
    op.drop_table('talks')
    op.drop_table('conference_issues')
    op.drop_table('conference_dismissals')
    op.drop_table('conference_favorites')
    op.drop_table('conferences')
    op.drop_table('user_social')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (submission_response, issue_reason, user_role):
        enum_type.drop(bind, checkfirst=True)
