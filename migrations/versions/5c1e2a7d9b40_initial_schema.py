"""initial schema

Revision ID: 5c1e2a7d9b40
Revises:
Create Date: 2026-10-18 09:12:44.318207

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a7d9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Match ids compare under the "C" collation on Postgres so that
# ck_matches_canonical_order uses the same code-point ordering as the service
# layer that canonicalizes pairs.
MATCH_USER_ID = sa.String(length=64).with_variant(
    sa.String(length=64, collation="C"), "postgresql"
)


def _profile_fk(
    column: str, ondelete: str = "CASCADE", type_: sa.types.TypeEngine | None = None
) -> sa.Column:
    return sa.Column(
        column,
        type_ if type_ is not None else sa.String(length=64),
        sa.ForeignKey("profiles.id", ondelete=ondelete),
        nullable=ondelete != "CASCADE",
    )


def upgrade() -> None:
    """Create profiles, matching, messaging and group tables."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("user_type", sa.Text(), nullable=True),
        sa.Column("guidelines_accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_photo_url", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("state", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=True),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=True),
        sa.Column("profile_visibility", sa.Text(), nullable=False, server_default="public"),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint(
            "user_type IS NULL OR user_type IN ('mom', 'expecting', 'caregiver')",
            name="ck_profiles_user_type",
        ),
        sa.CheckConstraint(
            "profile_visibility IN ('public', 'matches_only', 'private')",
            name="ck_profiles_visibility",
        ),
        sa.CheckConstraint("bio IS NULL OR length(bio) <= 500", name="ck_profiles_bio_length"),
    )
    op.create_index("ix_profiles_city", "profiles", ["city"])

    op.create_table(
        "kids",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _profile_fk("user_id"),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("age >= 0 AND age <= 18", name="ck_kids_age_range"),
    )
    op.create_index("ix_kids_user_age", "kids", ["user_id", "age"])

    op.create_table(
        "user_interests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _profile_fk("user_id"),
        sa.Column("interest", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "interest", name="uq_user_interests_user_interest"),
    )

    op.create_table(
        "swipes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _profile_fk("swiper_id"),
        _profile_fk("swiped_id"),
        sa.Column("direction", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_pair"),
        sa.CheckConstraint("direction IN ('left', 'right')", name="ck_swipes_direction"),
    )
    op.create_index("ix_swipes_swiper", "swipes", ["swiper_id", "created_at"])

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _profile_fk("user1_id", type_=MATCH_USER_ID),
        _profile_fk("user2_id", type_=MATCH_USER_ID),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        sa.CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_order"),
    )
    op.create_index("ix_matches_user2", "matches", ["user2_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _profile_fk("sender_id"),
        _profile_fk("recipient_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "length(content) > 0 AND length(content) <= 2000",
            name="ck_messages_content_length",
        ),
    )
    op.create_index(
        "ix_messages_sender_recipient", "messages", ["sender_id", "recipient_id", "created_at"]
    )
    op.create_index("ix_messages_recipient_read", "messages", ["recipient_id", "read_at"])

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("group_type", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("min_age", sa.Integer(), nullable=True),
        sa.Column("max_age", sa.Integer(), nullable=True),
        sa.Column("interest", sa.Text(), nullable=True),
        sa.Column("cover_photo_url", sa.Text(), nullable=True),
        _profile_fk("created_by", ondelete="SET NULL"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "group_type IN ('season_of_life', 'interest_based', 'local')",
            name="ck_groups_type",
        ),
    )
    op.create_index("ix_groups_city", "groups", ["city"])

    op.create_table(
        "group_members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk("user_id"),
        sa.Column("role", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
        sa.CheckConstraint("role IN ('admin', 'member', 'pending')", name="ck_group_members_role"),
    )
    op.create_index("ix_group_members_user", "group_members", ["user_id", "role"])

    op.create_table(
        "group_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk("sender_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _profile_fk("deleted_by", ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "length(content) > 0 AND length(content) <= 2000",
            name="ck_group_messages_content_length",
        ),
    )
    op.create_index(
        "ix_group_messages_group_time", "group_messages", ["group_id", "created_at"]
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_group_messages_group_time", table_name="group_messages")
    op.drop_table("group_messages")
    op.drop_index("ix_group_members_user", table_name="group_members")
    op.drop_table("group_members")
    op.drop_index("ix_groups_city", table_name="groups")
    op.drop_table("groups")
    op.drop_index("ix_messages_recipient_read", table_name="messages")
    op.drop_index("ix_messages_sender_recipient", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_matches_user2", table_name="matches")
    op.drop_table("matches")
    op.drop_index("ix_swipes_swiper", table_name="swipes")
    op.drop_table("swipes")
    op.drop_table("user_interests")
    op.drop_index("ix_kids_user_age", table_name="kids")
    op.drop_table("kids")
    op.drop_index("ix_profiles_city", table_name="profiles")
    op.drop_table("profiles")
