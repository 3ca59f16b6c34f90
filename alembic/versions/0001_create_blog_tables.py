"""Create blog tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create blogs, the category/tag vocabularies and their link tables, likes and comments."""

    op.create_table(
        'categories',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_categories_name', 'categories', ['name'])

    op.create_table(
        'tags',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_tags_name', 'tags', ['name'])

    op.create_table(
        'blogs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=300), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(length=150), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_blogs_created_at_id', 'blogs', ['created_at', 'id'])
    op.create_index('ix_blogs_author_created_at', 'blogs', ['author', 'created_at'])

    op.create_table(
        'blog_categories',
        sa.Column('blog_id', sa.String(length=36), nullable=False),
        sa.Column('category_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('blog_id', 'category_id'),
    )

    op.create_table(
        'blog_tags',
        sa.Column('blog_id', sa.String(length=36), nullable=False),
        sa.Column('tag_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('blog_id', 'tag_id'),
    )

    op.create_table(
        'likes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user', sa.String(length=150), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('blog_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('blog_id', 'user', name='uq_likes_blog_id_user'),
    )
    op.create_index('ix_likes_blog_id', 'likes', ['blog_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('author', sa.String(length=150), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('blog_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_blog_id', 'comments', ['blog_id'])


def downgrade():
    """Drop all blog tables in dependency order."""
    op.drop_index('ix_comments_blog_id', table_name='comments')
    op.drop_table('comments')
    op.drop_index('ix_likes_blog_id', table_name='likes')
    op.drop_table('likes')
    op.drop_table('blog_tags')
    op.drop_table('blog_categories')
    op.drop_index('ix_blogs_author_created_at', table_name='blogs')
    op.drop_index('ix_blogs_created_at_id', table_name='blogs')
    op.drop_table('blogs')
    op.drop_index('ix_tags_name', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_categories_name', table_name='categories')
    op.drop_table('categories')
