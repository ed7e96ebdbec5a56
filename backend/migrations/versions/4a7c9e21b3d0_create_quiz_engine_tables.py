"""create question, team, answer_record and competition_window tables

Revision ID: 4a7c9e21b3d0
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4a7c9e21b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'question' not in existing_tables:
        op.create_table(
            'question',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('category', sa.String(length=64), nullable=False),
            sa.Column('difficulty', sa.String(length=16), nullable=False),
            sa.Column('correct_answer', sa.String(length=256), nullable=False),
            sa.Column('max_attempts', sa.Integer(), nullable=False),
            sa.Column('hints', sa.Text(), nullable=True),
            sa.Column('links', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
        )

    if 'team' not in existing_tables:
        op.create_table(
            'team',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('team_id', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
            sa.Column('quiz_status', sa.String(length=32), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('violation_count', sa.Integer(), nullable=False),
            sa.Column('start_time', sa.DateTime(), nullable=True),
            sa.Column('end_time', sa.DateTime(), nullable=True),
            sa.Column('last_activity_at', sa.DateTime(), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_team_team_id', 'team', ['team_id'], unique=True)

    if 'answer_record' not in existing_tables:
        op.create_table(
            'answer_record',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('team_id', sa.Integer(), nullable=False),
            sa.Column('question_id', sa.Integer(), nullable=False),
            sa.Column('attempts_used', sa.Integer(), nullable=False),
            sa.Column('is_correct', sa.Boolean(), nullable=False),
            sa.Column('hints_used', sa.Integer(), nullable=False),
            sa.Column('last_submitted_text', sa.String(length=256), nullable=True),
            sa.Column('points_awarded', sa.Integer(), nullable=False),
            sa.Column('hint_points_spent', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['team_id'], ['team.id']),
            sa.ForeignKeyConstraint(['question_id'], ['question.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('team_id', 'question_id', name='uq_answer_record_team_question'),
        )
        op.create_index('ix_answer_record_team_id', 'answer_record', ['team_id'], unique=False)

    if 'competition_window' not in existing_tables:
        op.create_table(
            'competition_window',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('is_live', sa.Boolean(), nullable=False),
            sa.Column('duration_minutes', sa.Integer(), nullable=False),
            sa.Column('start_time', sa.DateTime(), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )


def downgrade():
    op.drop_table('competition_window')
    op.drop_index('ix_answer_record_team_id', table_name='answer_record')
    op.drop_table('answer_record')
    op.drop_index('ix_team_team_id', table_name='team')
    op.drop_table('team')
    op.drop_table('question')
