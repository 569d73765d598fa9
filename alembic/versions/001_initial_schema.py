"""Initial schema: websites, media, scrape targets and subscriptions.

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates:
    websites       — Supported source sites, seeded with the built-in scrapers.
    media          — Tracked works with their latest release and a version column.
    scrape_targets — Media pages per website.
    subscribers    — Web and chat users, keyed by their external identifier.
    subscriptions  — Subscriber ↔ media pairs.

Notes:
    - gen_random_uuid() requires pgcrypto or Postgres 13+ (built-in).
    - Name uniqueness on websites and media is case-insensitive (lower(name) index).
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

SEED_WEBSITES = [
    {"name": "AsuraScans", "url": "https://asuracomic.net"},
    {"name": "FlameScans", "url": "https://flamecomics.xyz"},
    {"name": "ReaperScans", "url": "https://reaperscans.com"},
    {"name": "MangaBuddy", "url": "https://mangabuddy.com"},
    {"name": "MangaPlus", "url": "https://mangaplus.shueisha.co.jp"},
]


def _id() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    # ------------------------------------------------------------------
    # websites
    # ------------------------------------------------------------------
    websites = op.create_table(
        "websites",
        _id(),
        sa.Column("name", sa.VARCHAR(255), nullable=False),
        sa.Column("url", sa.TEXT, nullable=False),
        _created_at(),
    )
    op.create_index("uq_websites_name_lower", "websites", [sa.text("lower(name)")], unique=True)

    # ------------------------------------------------------------------
    # media
    # ------------------------------------------------------------------
    op.create_table(
        "media",
        _id(),
        sa.Column("name", sa.VARCHAR(512), nullable=False),
        sa.Column("release_major", sa.INTEGER, nullable=True),
        sa.Column("release_minor", sa.INTEGER, nullable=True),
        sa.Column("release_url", sa.TEXT, nullable=True),
        sa.Column("version", sa.INTEGER, nullable=False, server_default=sa.text("0")),
        _created_at(),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("release_major IS NULL OR release_major >= 0", name="ck_media_release_major"),
        sa.CheckConstraint("release_minor IS NULL OR release_minor >= 0", name="ck_media_release_minor"),
    )
    op.create_index("uq_media_name_lower", "media", [sa.text("lower(name)")], unique=True)

    # ------------------------------------------------------------------
    # scrape_targets
    # ------------------------------------------------------------------
    op.create_table(
        "scrape_targets",
        _id(),
        sa.Column(
            "media_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("media.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "website_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("websites.id"),
            nullable=False,
        ),
        sa.Column("relative_path", sa.TEXT, nullable=False),
        sa.Column("url", sa.TEXT, nullable=False),
        sa.Column("position", sa.INTEGER, nullable=False, server_default=sa.text("0")),
        _created_at(),
        sa.UniqueConstraint("website_id", "url", name="uq_scrape_targets_website_url"),
        sa.UniqueConstraint("media_id", "website_id", name="uq_scrape_targets_media_website"),
    )

    # ------------------------------------------------------------------
    # subscribers / subscriptions
    # ------------------------------------------------------------------
    op.create_table(
        "subscribers",
        _id(),
        sa.Column("external_identifier", sa.VARCHAR(255), nullable=False),
        _created_at(),
        sa.UniqueConstraint("external_identifier", name="uq_subscribers_external_identifier"),
    )

    op.create_table(
        "subscriptions",
        _id(),
        sa.Column(
            "subscriber_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("subscribers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "media_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("media.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint("subscriber_id", "media_id", name="uq_subscriptions_subscriber_media"),
    )

    op.bulk_insert(websites, SEED_WEBSITES)


def downgrade() -> None:
    op.drop_table("subscriptions")
    op.drop_table("subscribers")
    op.drop_table("scrape_targets")
    op.drop_index("uq_media_name_lower", table_name="media")
    op.drop_table("media")
    op.drop_index("uq_websites_name_lower", table_name="websites")
    op.drop_table("websites")
