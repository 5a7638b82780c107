"""Create site widget tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 09:00:00.000000

Content, taxonomy, managed files, block instances and configuration objects.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

content_status = sa.Enum("DRAFT", "PUBLISHED", name="contentstatus")
file_status = sa.Enum("TEMPORARY", "PERMANENT", name="filestatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "content_types",
        sa.Column("machine_name", sa.String(), primary_key=True),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
    )

    op.create_table(
        "taxonomy_terms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vocabulary", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_taxonomy_terms_id", "taxonomy_terms", ["id"])
    op.create_index("ix_taxonomy_terms_vocabulary", "taxonomy_terms", ["vocabulary"])

    op.create_table(
        "content",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(length=36), nullable=False, unique=True),
        sa.Column("bundle", sa.String(), sa.ForeignKey("content_types.machine_name"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("body_summary", sa.Text(), nullable=True),
        sa.Column("status", content_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("fields", sa.JSON(), nullable=False),
    )
    op.create_index("ix_content_id", "content", ["id"])
    op.create_index("ix_content_title", "content", ["title"])
    op.create_index("ix_content_slug", "content", ["slug"], unique=True)
    op.create_index("ix_content_author_id", "content", ["author_id"])
    op.create_index("ix_content_bundle_status_created", "content", ["bundle", "status", "created_at"])

    op.create_table(
        "managed_files",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("uri", sa.String(), nullable=False, unique=True),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("status", file_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_managed_files_id", "managed_files", ["id"])
    op.create_index("ix_managed_files_status_created", "managed_files", ["status", "created_at"])

    op.create_table(
        "block_instances",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("plugin_id", sa.String(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_block_instances_id", "block_instances", ["id"])
    op.create_index("ix_block_instances_plugin_id", "block_instances", ["plugin_id"])

    op.create_table(
        "config_objects",
        sa.Column("name", sa.String(), primary_key=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("config_objects")
    op.drop_index("ix_block_instances_plugin_id", table_name="block_instances")
    op.drop_index("ix_block_instances_id", table_name="block_instances")
    op.drop_table("block_instances")
    op.drop_index("ix_managed_files_status_created", table_name="managed_files")
    op.drop_index("ix_managed_files_id", table_name="managed_files")
    op.drop_table("managed_files")
    op.drop_index("ix_content_bundle_status_created", table_name="content")
    op.drop_index("ix_content_author_id", table_name="content")
    op.drop_index("ix_content_slug", table_name="content")
    op.drop_index("ix_content_title", table_name="content")
    op.drop_index("ix_content_id", table_name="content")
    op.drop_table("content")
    op.drop_index("ix_taxonomy_terms_vocabulary", table_name="taxonomy_terms")
    op.drop_index("ix_taxonomy_terms_id", table_name="taxonomy_terms")
    op.drop_table("taxonomy_terms")
    op.drop_table("content_types")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
    content_status.drop(op.get_bind(), checkfirst=True)
    file_status.drop(op.get_bind(), checkfirst=True)
