"""create team, game_session, quiz tables, mine actions and timers

Revision ID: 5b7e2a91c3d4
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7e2a91c3d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'team',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_name', sa.String(length=50), nullable=False),
        sa.Column('name_key', sa.String(length=50), nullable=False),
        sa.Column('access_code', sa.String(length=32), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('game_completed', sa.Boolean(), nullable=False),
        sa.Column('questions_correct', sa.Integer(), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('quiz_score', sa.Integer(), nullable=False),
        sa.Column('mine_score', sa.Integer(), nullable=False),
        sa.Column('pro_score', sa.Integer(), nullable=False),
        sa.Column('total_score', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_team_name_key', 'team', ['name_key'], unique=True)
    op.create_index('ix_team_created_at', 'team', ['created_at'], unique=False)

    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=64), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('quiz_score', sa.Integer(), nullable=False),
        sa.Column('mine_score', sa.Integer(), nullable=False),
        sa.Column('pro_score', sa.Integer(), nullable=False),
        sa.Column('total_score', sa.Integer(), nullable=False),
        sa.Column('can_play_mine', sa.Boolean(), nullable=False),
        sa.CheckConstraint('quiz_score >= 0 AND quiz_score <= 8', name='ck_game_session_quiz_score'),
        sa.CheckConstraint('mine_score >= 0 AND pro_score >= 0', name='ck_game_session_mine_scores'),
        sa.ForeignKeyConstraint(['team_id'], ['team.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_game_session_session_id', 'game_session', ['session_id'], unique=True)
    op.create_index('ix_game_session_team_id', 'game_session', ['team_id'], unique=False)
    op.create_index('ix_game_session_started_at', 'game_session', ['started_at'], unique=False)

    op.create_table(
        'quiz_question',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('question_id', sa.Integer(), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('correct_answer', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('difficulty', 'question_id', name='uq_quiz_question_slot'),
    )
    op.create_index('ix_quiz_question_difficulty', 'quiz_question', ['difficulty'], unique=False)

    op.create_table(
        'quiz_response',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_session_id', sa.Integer(), nullable=False),
        sa.Column('question_id', sa.Integer(), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('selected_answer', sa.Integer(), nullable=False),
        sa.Column('correct_answer', sa.Integer(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('answered_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['game_session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('game_session_id', 'question_id', name='uq_quiz_response_session_question'),
    )
    op.create_index('ix_quiz_response_game_session_id', 'quiz_response', ['game_session_id'], unique=False)
    op.create_index('ix_quiz_response_answered_at', 'quiz_response', ['answered_at'], unique=False)

    op.create_table(
        'mine_game_action',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_session_id', sa.Integer(), nullable=False),
        sa.Column('cell_x', sa.Integer(), nullable=False),
        sa.Column('cell_y', sa.Integer(), nullable=False),
        sa.Column('cell_type', sa.String(length=16), nullable=False),
        sa.Column('action', sa.String(length=16), nullable=False),
        sa.Column('result', sa.String(length=16), nullable=False),
        sa.Column('action_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('cell_x >= 0 AND cell_x <= 2 AND cell_y >= 0 AND cell_y <= 2', name='ck_mine_game_action_cell'),
        sa.ForeignKeyConstraint(['game_session_id'], ['game_session.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_mine_game_action_game_session_id', 'mine_game_action', ['game_session_id'], unique=False)
    op.create_index('ix_mine_game_action_action_at', 'mine_game_action', ['action_at'], unique=False)

    op.create_table(
        'timer_setting',
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('seconds', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('difficulty'),
    )


def downgrade():
    op.drop_table('timer_setting')
    op.drop_index('ix_mine_game_action_action_at', table_name='mine_game_action')
    op.drop_index('ix_mine_game_action_game_session_id', table_name='mine_game_action')
    op.drop_table('mine_game_action')
    op.drop_index('ix_quiz_response_answered_at', table_name='quiz_response')
    op.drop_index('ix_quiz_response_game_session_id', table_name='quiz_response')
    op.drop_table('quiz_response')
    op.drop_index('ix_quiz_question_difficulty', table_name='quiz_question')
    op.drop_table('quiz_question')
    op.drop_index('ix_game_session_started_at', table_name='game_session')
    op.drop_index('ix_game_session_team_id', table_name='game_session')
    op.drop_index('ix_game_session_session_id', table_name='game_session')
    op.drop_table('game_session')
    op.drop_index('ix_team_created_at', table_name='team')
    op.drop_index('ix_team_name_key', table_name='team')
    op.drop_table('team')
