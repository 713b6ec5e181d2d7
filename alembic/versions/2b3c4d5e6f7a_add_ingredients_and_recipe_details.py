"""add_ingredients_and_recipe_details

Revision ID: 2b3c4d5e6f7a
Revises: 1a2b3c4d5e6f
Create Date: 2025-02-02

Adds:
- description, meal type, timings, cuisine, servings, directions, source URL
  and special tools to recipes
- ingredients table, unique on the lowercased name (find-or-create upserts on it)
- recipe_ingredients join table, cascading on recipe delete
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '2b3c4d5e6f7a'
down_revision = '1a2b3c4d5e6f'
branch_labels = None
depends_on = None


meal_type = sa.Enum('snack', 'meal', 'side dish', 'appetizer', 'dessert', name='meal_type')
ingredient_category = sa.Enum(
    'meat', 'dairy', 'produce', 'pantry', 'spices', 'other', name='ingredient_category'
)


def upgrade() -> None:
    # add_column does not emit CREATE TYPE; create_table does, for ingredient_category
    meal_type.create(op.get_bind(), checkfirst=True)

    # Recipe details
    op.add_column('recipes', sa.Column('description', sa.String(300), nullable=True))
    op.add_column('recipes', sa.Column('meal_type', meal_type, nullable=True))
    op.add_column('recipes', sa.Column('prep_time', sa.Integer(), nullable=True))
    op.add_column('recipes', sa.Column('cook_time', sa.Integer(), nullable=True))
    op.add_column('recipes', sa.Column('extra_time', sa.Integer(), nullable=True))
    op.add_column('recipes', sa.Column('cuisine', sa.String(100), nullable=True))
    op.add_column('recipes', sa.Column('servings', sa.Integer(), nullable=True))
    op.add_column('recipes', sa.Column('directions', sa.Text(), nullable=False, server_default=''))
    op.add_column('recipes', sa.Column('source_url', sa.String(2048), nullable=True))
    op.add_column(
        'recipes',
        sa.Column(
            'special_tools',
            sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'),
            nullable=False,
            server_default='[]',
        ),
    )

    # Ingredients
    op.create_table(
        'ingredients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('normalized_name', sa.String(255), nullable=False),
        sa.Column('category', ingredient_category, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        op.f('ix_ingredients_normalized_name'), 'ingredients', ['normalized_name'], unique=True
    )

    # Recipe ingredient lines
    op.create_table(
        'recipe_ingredients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('amount', sa.Float(), nullable=True),
        sa.Column('measurement', sa.String(50), nullable=True),
        sa.Column('is_optional', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredients.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_recipe_ingredients_recipe_id', 'recipe_ingredients', ['recipe_id'])
    op.create_index('idx_recipe_ingredients_ingredient_id', 'recipe_ingredients', ['ingredient_id'])


def downgrade() -> None:
    op.drop_index('idx_recipe_ingredients_ingredient_id', table_name='recipe_ingredients')
    op.drop_index('idx_recipe_ingredients_recipe_id', table_name='recipe_ingredients')
    op.drop_table('recipe_ingredients')

    op.drop_index(op.f('ix_ingredients_normalized_name'), table_name='ingredients')
    op.drop_table('ingredients')

    for column in (
        'special_tools', 'source_url', 'directions', 'servings', 'cuisine',
        'extra_time', 'cook_time', 'prep_time', 'meal_type', 'description',
    ):
        op.drop_column('recipes', column)

    bind = op.get_bind()
    ingredient_category.drop(bind, checkfirst=True)
    meal_type.drop(bind, checkfirst=True)
