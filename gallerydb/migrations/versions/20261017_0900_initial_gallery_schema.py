"""initial gallery schema

Revision ID: 3f9c2a7d41b8
Revises:
Create Date: 2026-10-17 09:00:12.418203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d41b8"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list:
    return [
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.String(length=256), nullable=False),
        sa.Column("date_added", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_modified_by", sa.String(length=256), nullable=False),
        sa.Column("date_last_modified", sa.DateTime(timezone=True), nullable=False),
    ]


def _file_columns(prefix: str) -> list:
    return [
        sa.Column(f"{prefix}_filename", sa.String(length=255), nullable=False),
        sa.Column(f"{prefix}_width", sa.Integer(), nullable=False),
        sa.Column(f"{prefix}_height", sa.Integer(), nullable=False),
        sa.Column(f"{prefix}_size_kb", sa.Integer(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "galleries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False),
        sa.Column("is_template", sa.Boolean(), nullable=False),
        sa.Column("date_added", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "albums",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gallery_id", sa.Integer(), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("directory_name", sa.String(length=255), nullable=False),
        sa.Column("thumbnail_media_object_id", sa.Integer(), nullable=False),
        sa.Column("sort_by_meta_name", sa.String(length=40), nullable=False),
        sa.Column("sort_ascending", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.Column("owned_by", sa.String(length=256), nullable=False),
        sa.Column("owner_role_name", sa.String(length=256), nullable=False),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["gallery_id"], ["galleries.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["albums.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_albums_gallery_id", "albums", ["gallery_id"])
    op.create_index("ix_albums_parent_id", "albums", ["parent_id"])

    op.create_table(
        "media_objects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("album_id", sa.Integer(), nullable=False),
        *_file_columns("thumbnail"),
        *_file_columns("optimized"),
        *_file_columns("original"),
        sa.Column("external_html_source", sa.Text(), nullable=False),
        sa.Column("external_type", sa.String(length=15), nullable=False),
        *_audit_columns(),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_media_objects_album_id", "media_objects", ["album_id"])

    op.create_table(
        "metadata_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=40), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("raw_value", sa.Text(), nullable=True),
        sa.Column("album_id", sa.Integer(), nullable=True),
        sa.Column("media_object_id", sa.Integer(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "(album_id IS NULL) <> (media_object_id IS NULL)",
            name="ck_metadata_single_owner",
        ),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"]),
        sa.ForeignKeyConstraint(["media_object_id"], ["media_objects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_metadata_items_name", "metadata_items", ["name"])
    op.create_index("ix_metadata_items_album_id", "metadata_items", ["album_id"])
    op.create_index(
        "ix_metadata_items_media_object_id", "metadata_items", ["media_object_id"]
    )

    op.create_table(
        "tags",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.CheckConstraint("length(trim(name)) > 0", name="ck_tag_non_empty"),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "metadata_tags",
        sa.Column("metadata_id", sa.Integer(), nullable=False),
        sa.Column("tag_name", sa.String(length=100), nullable=False),
        sa.Column("gallery_id", sa.Integer(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["metadata_id"], ["metadata_items.id"]),
        sa.ForeignKeyConstraint(["tag_name"], ["tags.name"]),
        sa.ForeignKeyConstraint(["gallery_id"], ["galleries.id"]),
        sa.PrimaryKeyConstraint("metadata_id", "tag_name"),
    )
    op.create_index("ix_metadata_tags_gallery_id", "metadata_tags", ["gallery_id"])

    op.create_table(
        "app_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gallery_id", sa.Integer(), nullable=True),
        sa.Column("event_type", sa.String(length=10), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("ex_type", sa.String(length=1000), nullable=True),
        sa.Column("ex_source", sa.String(length=1000), nullable=True),
        sa.Column("ex_stack_trace", sa.Text(), nullable=True),
        sa.Column("data", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_app_events_gallery_id", "app_events", ["gallery_id"])
    op.create_index("ix_app_events_timestamp", "app_events", ["timestamp"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_app_events_timestamp", table_name="app_events")
    op.drop_index("ix_app_events_gallery_id", table_name="app_events")
    op.drop_table("app_events")
    op.drop_index("ix_metadata_tags_gallery_id", table_name="metadata_tags")
    op.drop_table("metadata_tags")
    op.drop_table("tags")
    op.drop_index("ix_metadata_items_media_object_id", table_name="metadata_items")
    op.drop_index("ix_metadata_items_album_id", table_name="metadata_items")
    op.drop_index("ix_metadata_items_name", table_name="metadata_items")
    op.drop_table("metadata_items")
    op.drop_index("ix_media_objects_album_id", table_name="media_objects")
    op.drop_table("media_objects")
    op.drop_index("ix_albums_parent_id", table_name="albums")
    op.drop_index("ix_albums_gallery_id", table_name="albums")
    op.drop_table("albums")
    op.drop_table("galleries")
