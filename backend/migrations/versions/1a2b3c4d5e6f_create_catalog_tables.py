"""create game_mode, question and question_report tables

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game_mode' not in existing_tables:
        op.create_table(
            'game_mode',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('slug', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('emoji', sa.String(length=16), nullable=True),
            sa.Column('emoji_url', sa.String(length=512), nullable=True),
            sa.Column('image_url', sa.String(length=512), nullable=True),
        )
        op.create_index('ix_game_mode_slug', 'game_mode', ['slug'], unique=True)

    if 'question' not in existing_tables:
        op.create_table(
            'question',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('mode', sa.String(length=64), sa.ForeignKey('game_mode.slug'), nullable=False),
            sa.Column('content', sa.Text(), nullable=False),
            sa.Column('type', sa.String(length=16), nullable=False),
            sa.Column('points', sa.Integer(), nullable=False),
        )
        op.create_index('ix_question_mode', 'question', ['mode'])

    if 'question_report' not in existing_tables:
        op.create_table(
            'question_report',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('question_id', sa.String(length=36), nullable=False),
            sa.Column('game_id', sa.String(length=36), nullable=True),
            sa.Column('room_id', sa.String(length=36), nullable=True),
            sa.Column('round', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.Float(), nullable=False),
        )
        op.create_index('ix_question_report_question_id', 'question_report', ['question_id'])


def downgrade():
    op.drop_index('ix_question_report_question_id', table_name='question_report')
    op.drop_table('question_report')
    op.drop_index('ix_question_mode', table_name='question')
    op.drop_table('question')
    op.drop_index('ix_game_mode_slug', table_name='game_mode')
    op.drop_table('game_mode')
