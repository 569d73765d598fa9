"""Database repository layer.

Postgres implementations of the ports in ``release_notifier.application.ports``.
They do not log and contain no business logic; they are pure data access
objects.

Responsibilities:
  - Construct and execute SQL statements.
  - Map result rows to domain model instances.
  - Let SQLAlchemy exceptions propagate to callers (the dispatcher turns
    them into ``Unexpected`` results).

The one translation they do perform: a versioned ``media`` update that
matched no row raises ``ConcurrencyConflictError``.

Atomicity: every public method runs in exactly one ``get_connection()``
transaction, so a Media is written together with its targets. Subscriptions
are written one (subscriber, media) row at a time.

Classes:
    PostgresWebsiteRepository     — get(), get_by_name(), list_all()
    PostgresMediaRepository       — get(), get_by_name(), list_all(), list_page(),
                                    count(), add(), save(), find_scrape_target()
    PostgresSubscriberRepository  — get_by_external_identifier(), get_or_add(),
                                    add_subscription(), remove_subscription(),
                                    list_subscribed_to()
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncConnection

from release_notifier.domain.exceptions import ConcurrencyConflictError
from release_notifier.domain.models import (
    Media,
    ReleaseDetails,
    ScrapeTarget,
    Subscriber,
    Subscription,
    Website,
)
from release_notifier.infra.db import get_connection
from release_notifier.infra.tables import (
    media_table,
    scrape_targets_table,
    subscribers_table,
    subscriptions_table,
    websites_table,
)


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _row_to_website(row: sa.engine.Row) -> Website:  # type: ignore[type-arg]
    return Website(id=row.id, name=row.name, url=row.url)


def _row_to_scrape_target(row: sa.engine.Row) -> ScrapeTarget:  # type: ignore[type-arg]
    return ScrapeTarget(
        id=row.id,
        media_id=row.media_id,
        website_id=row.website_id,
        relative_path=row.relative_path,
        url=row.url,
    )


def _row_to_media(
    row: sa.engine.Row,  # type: ignore[type-arg]
    scrape_targets: list[ScrapeTarget],
) -> Media:
    release_details = None
    if row.release_major is not None:
        release_details = ReleaseDetails(
            major=row.release_major,
            minor=row.release_minor or 0,
            release_url=row.release_url,
        )
    return Media(
        id=row.id,
        name=row.name,
        release_details=release_details,
        scrape_targets=tuple(scrape_targets),
        version=row.version,
    )


def _release_values(media: Media) -> dict[str, object]:
    details = media.release_details
    return {
        "release_major": details.major if details else None,
        "release_minor": details.minor if details else None,
        "release_url": details.release_url if details else None,
    }


# ---------------------------------------------------------------------------
# PostgresWebsiteRepository
# ---------------------------------------------------------------------------


class PostgresWebsiteRepository:
    """Data access layer for the ``websites`` table."""

    async def get(self, website_id: uuid.UUID) -> Optional[Website]:
        stmt = sa.select(websites_table).where(websites_table.c.id == website_id)
        async with get_connection() as conn:
            row = (await conn.execute(stmt)).fetchone()
        return _row_to_website(row) if row is not None else None

    async def get_by_name(self, name: str) -> Optional[Website]:
        """Case-insensitive lookup, matching the ``uq_websites_name_lower`` index."""
        stmt = sa.select(websites_table).where(
            sa.func.lower(websites_table.c.name) == name.strip().lower()
        )
        async with get_connection() as conn:
            row = (await conn.execute(stmt)).fetchone()
        return _row_to_website(row) if row is not None else None

    async def list_all(self) -> list[Website]:
        stmt = sa.select(websites_table).order_by(sa.func.lower(websites_table.c.name))
        async with get_connection() as conn:
            result = await conn.execute(stmt)
        return [_row_to_website(row) for row in result.fetchall()]


# ---------------------------------------------------------------------------
# PostgresMediaRepository
# ---------------------------------------------------------------------------


class PostgresMediaRepository:
    """Data access layer for ``media`` and its owned ``scrape_targets``."""

    async def get(self, media_id: uuid.UUID) -> Optional[Media]:
        stmt = sa.select(media_table).where(media_table.c.id == media_id)
        async with get_connection() as conn:
            media = await self._hydrate(conn, stmt)
        return media[0] if media else None

    async def get_by_name(self, name: str) -> Optional[Media]:
        stmt = sa.select(media_table).where(
            sa.func.lower(media_table.c.name) == name.strip().lower()
        )
        async with get_connection() as conn:
            media = await self._hydrate(conn, stmt)
        return media[0] if media else None

    async def list_all(self) -> list[Media]:
        stmt = sa.select(media_table).order_by(sa.func.lower(media_table.c.name))
        async with get_connection() as conn:
            return await self._hydrate(conn, stmt)

    async def list_page(self, offset: int, limit: int) -> list[Media]:
        stmt = (
            sa.select(media_table)
            .order_by(sa.func.lower(media_table.c.name))
            .offset(offset)
            .limit(limit)
        )
        async with get_connection() as conn:
            return await self._hydrate(conn, stmt)

    async def count(self) -> int:
        stmt = sa.select(sa.func.count()).select_from(media_table)
        async with get_connection() as conn:
            return (await conn.execute(stmt)).scalar_one()

    async def find_scrape_target(self, website_id: uuid.UUID, url: str) -> Optional[ScrapeTarget]:
        stmt = sa.select(scrape_targets_table).where(
            scrape_targets_table.c.website_id == website_id,
            scrape_targets_table.c.url == url,
        )
        async with get_connection() as conn:
            row = (await conn.execute(stmt)).fetchone()
        return _row_to_scrape_target(row) if row is not None else None

    async def add(self, media: Media) -> Media:
        """Insert a new Media together with its scrape targets.

        Raises:
            sqlalchemy.exc.IntegrityError: name or a target already taken.
        """
        async with get_connection() as conn:
            await conn.execute(
                sa.insert(media_table).values(
                    id=media.id,
                    name=media.name,
                    version=media.version,
                    **_release_values(media),
                )
            )
            await self._insert_targets(conn, media.scrape_targets, first_position=0)
        return media

    async def save(self, media: Media) -> Media:
        """Persist release details and any newly attached targets.

        The update only applies if the stored version still equals
        ``media.version``; the returned Media carries the incremented version.

        Raises:
            ConcurrencyConflictError: The row was changed since it was loaded.
            sqlalchemy.exc.IntegrityError: A new target collides with an existing one.
        """
        stmt = (
            sa.update(media_table)
            .where(
                media_table.c.id == media.id,
                media_table.c.version == media.version,
            )
            .values(
                version=media_table.c.version + 1,
                updated_at=datetime.now(tz=timezone.utc),
                **_release_values(media),
            )
        )

        async with get_connection() as conn:
            result = await conn.execute(stmt)
            if result.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"media {media.id} changed since version {media.version} was loaded"
                )

            existing_ids = set(
                (
                    await conn.execute(
                        sa.select(scrape_targets_table.c.id).where(
                            scrape_targets_table.c.media_id == media.id
                        )
                    )
                ).scalars()
            )
            new_targets = [target for target in media.scrape_targets if target.id not in existing_ids]
            await self._insert_targets(conn, new_targets, first_position=len(existing_ids))

        return media.model_copy(update={"version": media.version + 1})

    @staticmethod
    async def _insert_targets(
        conn: AsyncConnection,
        targets: "tuple[ScrapeTarget, ...] | list[ScrapeTarget]",
        first_position: int,
    ) -> None:
        if not targets:
            return
        await conn.execute(
            sa.insert(scrape_targets_table),
            [
                {
                    "id": target.id,
                    "media_id": target.media_id,
                    "website_id": target.website_id,
                    "relative_path": target.relative_path,
                    "url": target.url,
                    "position": first_position + offset,
                }
                for offset, target in enumerate(targets)
            ],
        )

    @staticmethod
    async def _hydrate(conn: AsyncConnection, stmt: sa.Select) -> list[Media]:  # type: ignore[type-arg]
        """Run a ``media`` select and attach each row's scrape targets."""
        media_rows = (await conn.execute(stmt)).fetchall()
        if not media_rows:
            return []

        target_rows = (
            await conn.execute(
                sa.select(scrape_targets_table)
                .where(scrape_targets_table.c.media_id.in_([row.id for row in media_rows]))
                .order_by(scrape_targets_table.c.position, scrape_targets_table.c.created_at)
            )
        ).fetchall()

        targets_by_media: dict[uuid.UUID, list[ScrapeTarget]] = defaultdict(list)
        for row in target_rows:
            targets_by_media[row.media_id].append(_row_to_scrape_target(row))

        return [_row_to_media(row, targets_by_media[row.id]) for row in media_rows]


# ---------------------------------------------------------------------------
# PostgresSubscriberRepository
# ---------------------------------------------------------------------------


class PostgresSubscriberRepository:
    """Data access layer for ``subscribers`` and their ``subscriptions``."""

    async def get_by_external_identifier(self, external_identifier: str) -> Optional[Subscriber]:
        stmt = sa.select(subscribers_table).where(
            subscribers_table.c.external_identifier == external_identifier
        )
        async with get_connection() as conn:
            subscribers = await self._hydrate(conn, stmt)
        return subscribers[0] if subscribers else None

    async def list_subscribed_to(self, media_id: uuid.UUID) -> list[Subscriber]:
        stmt = sa.select(subscribers_table).where(
            subscribers_table.c.id.in_(
                sa.select(subscriptions_table.c.subscriber_id).where(
                    subscriptions_table.c.media_id == media_id
                )
            )
        )
        async with get_connection() as conn:
            return await self._hydrate(conn, stmt)

    async def get_or_add(self, subscriber: Subscriber) -> Subscriber:
        """Insert ``subscriber`` unless its external identifier is taken.

        Two first-time subscribes of the same user both end up with the row
        that won the insert.
        """
        async with get_connection() as conn:
            await conn.execute(
                pg_insert(subscribers_table)
                .values(id=subscriber.id, external_identifier=subscriber.external_identifier)
                .on_conflict_do_nothing(constraint="uq_subscribers_external_identifier")
            )
            stored = await self._hydrate(
                conn,
                sa.select(subscribers_table).where(
                    subscribers_table.c.external_identifier == subscriber.external_identifier
                ),
            )
        return stored[0]

    async def add_subscription(self, subscription: Subscription) -> bool:
        """Insert one (subscriber, media) row; an existing pair is left alone."""
        stmt = (
            pg_insert(subscriptions_table)
            .values(
                id=subscription.id,
                subscriber_id=subscription.subscriber_id,
                media_id=subscription.media_id,
            )
            .on_conflict_do_nothing(constraint="uq_subscriptions_subscriber_media")
        )
        async with get_connection() as conn:
            result = await conn.execute(stmt)
        return result.rowcount == 1

    async def remove_subscription(self, subscriber_id: uuid.UUID, media_id: uuid.UUID) -> int:
        stmt = sa.delete(subscriptions_table).where(
            subscriptions_table.c.subscriber_id == subscriber_id,
            subscriptions_table.c.media_id == media_id,
        )
        async with get_connection() as conn:
            result = await conn.execute(stmt)
        return result.rowcount

    @staticmethod
    async def _hydrate(conn: AsyncConnection, stmt: sa.Select) -> list[Subscriber]:  # type: ignore[type-arg]
        subscriber_rows = (await conn.execute(stmt)).fetchall()
        if not subscriber_rows:
            return []

        subscription_rows = (
            await conn.execute(
                sa.select(subscriptions_table)
                .where(
                    subscriptions_table.c.subscriber_id.in_([row.id for row in subscriber_rows])
                )
                .order_by(subscriptions_table.c.created_at)
            )
        ).fetchall()

        subscriptions_by_subscriber: dict[uuid.UUID, list[Subscription]] = defaultdict(list)
        for row in subscription_rows:
            subscriptions_by_subscriber[row.subscriber_id].append(
                Subscription(id=row.id, subscriber_id=row.subscriber_id, media_id=row.media_id)
            )

        return [
            Subscriber(
                id=row.id,
                external_identifier=row.external_identifier,
                subscriptions=tuple(subscriptions_by_subscriber[row.id]),
            )
            for row in subscriber_rows
        ]
