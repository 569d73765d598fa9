"""SQLAlchemy Core table definitions.

No ORM mapping is used: repositories hydrate the pydantic domain models from
result rows, keeping the domain layer free of SQLAlchemy.

Tables:
    websites       — source sites (unique key: lower(name))
    media          — tracked works with their latest release (unique key: lower(name))
    scrape_targets — pages scraped per media (unique keys: (website_id, url), (media_id, website_id))
    subscribers    — web / chat users (unique key: external_identifier)
    subscriptions  — subscriber ↔ media pairs (unique key: (subscriber_id, media_id))

The unique keys are the storage-level backstop for the domain invariants:
concurrent commands that both pass their in-memory checks still cannot both
commit a duplicate.
"""

from __future__ import annotations

import sqlalchemy as sa

from release_notifier.infra.db import metadata


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


# ---------------------------------------------------------------------------
# websites
# ---------------------------------------------------------------------------

websites_table: sa.Table = sa.Table(
    "websites",
    metadata,
    _id_column(),
    sa.Column("name", sa.VARCHAR(255), nullable=False),
    sa.Column("url", sa.TEXT, nullable=False),
    _created_at_column(),
)

sa.Index("uq_websites_name_lower", sa.func.lower(websites_table.c.name), unique=True)

# ---------------------------------------------------------------------------
# media
# ---------------------------------------------------------------------------

media_table: sa.Table = sa.Table(
    "media",
    metadata,
    _id_column(),
    sa.Column("name", sa.VARCHAR(512), nullable=False),
    # All three release columns are NULL together until the first scrape.
    sa.Column("release_major", sa.INTEGER, nullable=True),
    sa.Column("release_minor", sa.INTEGER, nullable=True),
    sa.Column("release_url", sa.TEXT, nullable=True),
    # Optimistic concurrency token, incremented by every update.
    sa.Column("version", sa.INTEGER, nullable=False, server_default=sa.text("0")),
    _created_at_column(),
    sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    sa.CheckConstraint("release_major IS NULL OR release_major >= 0", name="ck_media_release_major"),
    sa.CheckConstraint("release_minor IS NULL OR release_minor >= 0", name="ck_media_release_minor"),
)

sa.Index("uq_media_name_lower", sa.func.lower(media_table.c.name), unique=True)

# ---------------------------------------------------------------------------
# scrape_targets
# ---------------------------------------------------------------------------

scrape_targets_table: sa.Table = sa.Table(
    "scrape_targets",
    metadata,
    _id_column(),
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
    # Insertion order defines the order of Media.scrape_targets.
    sa.Column("position", sa.INTEGER, nullable=False, server_default=sa.text("0")),
    _created_at_column(),
    sa.UniqueConstraint("website_id", "url", name="uq_scrape_targets_website_url"),
    sa.UniqueConstraint("media_id", "website_id", name="uq_scrape_targets_media_website"),
)

# ---------------------------------------------------------------------------
# subscribers / subscriptions
# ---------------------------------------------------------------------------

subscribers_table: sa.Table = sa.Table(
    "subscribers",
    metadata,
    _id_column(),
    sa.Column("external_identifier", sa.VARCHAR(255), nullable=False),
    _created_at_column(),
    sa.UniqueConstraint("external_identifier", name="uq_subscribers_external_identifier"),
)

subscriptions_table: sa.Table = sa.Table(
    "subscriptions",
    metadata,
    _id_column(),
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
    _created_at_column(),
    sa.UniqueConstraint("subscriber_id", "media_id", name="uq_subscriptions_subscriber_media"),
)
