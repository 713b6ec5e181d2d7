"""create_recipes_table

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-01-12

First recipe shape: name, difficulty and a favorite flag.
"""
from alembic import op
import sqlalchemy as sa

revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'recipes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column(
            'difficulty',
            sa.Enum('easy', 'medium', 'hard', name='recipe_difficulty'),
            nullable=False,
        ),
        sa.Column('favorite', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_recipes_name', 'recipes', ['name'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_recipes_name', table_name='recipes')
    op.drop_table('recipes')
    sa.Enum(name='recipe_difficulty').drop(op.get_bind(), checkfirst=True)
