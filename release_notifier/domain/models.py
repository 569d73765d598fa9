"""Domain models.

Pure data layer: no infrastructure, no configuration, no I/O.

All models are frozen pydantic v2 models. Mutations are expressed by
returning a new instance (``model_copy(update=...)``) wrapped in a
``Result``, so persistence and the scrape cycle can work on independently
loaded snapshots without aliasing hazards.

Constructors and mutators that enforce business invariants go through
``Invariant`` and return a ``Result``; calling the pydantic constructor
directly is reserved for hydration from storage, where rows are trusted.

Cross-entity references are by id: a ScrapeTarget knows its ``media_id`` and
``website_id``, a Subscription knows its ``subscriber_id`` and ``media_id``.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from release_notifier.domain.invariants import Invariant
from release_notifier.domain.results import Errors, Result

NO_RELEASE_DISPLAY: str = "No Release scraped yet"


def join_url(base_url: str, relative_path: str) -> str:
    """Join a website base URL and a relative path with exactly one slash."""
    return f"{base_url.rstrip('/')}/{relative_path.lstrip('/')}"


# ---------------------------------------------------------------------------
# Releases
# ---------------------------------------------------------------------------


class ReleaseDetails(BaseModel):
    """The latest known release of a Media.

    Ordering is lexicographic on ``(major, minor)``; ``release_url`` does not
    take part in comparisons.
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0, description="Chapter number.")
    minor: int = Field(default=0, ge=0, description="Sub-chapter number, 0 if none.")
    release_url: str = Field(description="Canonical URL of the release.")

    @classmethod
    def create(cls, major: int, minor: int, release_url: str) -> Result["ReleaseDetails"]:
        return (
            Invariant.create()
            .non_negative(major, "major")
            .non_negative(minor, "minor")
            .not_null_or_whitespace(release_url, "release_url")
            .validate_and_create(
                lambda: cls(major=major, minor=minor, release_url=release_url)
            )
        )

    @property
    def version(self) -> tuple[int, int]:
        return (self.major, self.minor)

    def is_newer_than(self, other: Optional["ReleaseDetails"]) -> bool:
        """Strictly greater than ``other``; anything is newer than no release."""
        return other is None or self.version > other.version

    @property
    def display_string(self) -> str:
        if self.minor > 0:
            return f"Chapter {self.major}.{self.minor}"
        return f"Chapter {self.major}"


class CandidateRelease(BaseModel):
    """A release marker freshly extracted from a source page, not yet committed.

    ``media_name`` is the title found on the page, when the site exposes
    one. It is only used when a Media is first created from a page.
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(default=0, ge=0)
    release_url: str
    media_name: Optional[str] = None

    def to_release_details(self) -> Result[ReleaseDetails]:
        return ReleaseDetails.create(self.major, self.minor, self.release_url)


# ---------------------------------------------------------------------------
# Websites and scrape targets
# ---------------------------------------------------------------------------


class Website(BaseModel):
    """An external source. Created by an admin seeding flow, immutable."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(description="Unique, compared case-insensitively.")
    url: str = Field(description="Base URL every relative path is appended to.")

    @classmethod
    def create(cls, id: uuid.UUID, name: str, url: str) -> Result["Website"]:
        return (
            Invariant.create()
            .not_null_or_whitespace(name, "name")
            .not_null_or_whitespace(url, "url")
            .validate_and_create(lambda: cls(id=id, name=name.strip(), url=url.strip()))
        )

    def build_url(self, relative_path: str) -> str:
        return join_url(self.url, relative_path)

    def has_name(self, name: str) -> bool:
        return self.name.casefold() == name.strip().casefold()


class ScrapeTarget(BaseModel):
    """One page on one Website that is scraped for one Media's releases."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    media_id: uuid.UUID
    website_id: uuid.UUID
    relative_path: str
    url: str = Field(description="Website.url joined with relative_path.")

    @classmethod
    def create(
        cls,
        id: uuid.UUID,
        media_id: uuid.UUID,
        website: Website,
        relative_path: str,
    ) -> Result["ScrapeTarget"]:
        return (
            Invariant.create()
            .not_null_or_whitespace(relative_path, "relative_path")
            .validate_and_create(
                lambda: cls(
                    id=id,
                    media_id=media_id,
                    website_id=website.id,
                    relative_path=relative_path.strip(),
                    url=website.build_url(relative_path.strip()),
                )
            )
        )


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------


class Media(BaseModel):
    """A tracked serialized work.

    Owns its scrape targets and its current ReleaseDetails. ``version`` is the
    optimistic-concurrency token checked by the repository on save; domain
    code never changes it.
    """

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    release_details: Optional[ReleaseDetails] = None
    scrape_targets: tuple[ScrapeTarget, ...] = ()
    version: int = Field(default=0, ge=0)

    @classmethod
    def create(
        cls,
        id: uuid.UUID,
        name: str,
        release_details: Optional[ReleaseDetails] = None,
    ) -> Result["Media"]:
        return (
            Invariant.create()
            .not_null_or_whitespace(name, "name")
            .validate_and_create(
                lambda: cls(id=id, name=name.strip(), release_details=release_details)
            )
        )

    @property
    def display_release(self) -> str:
        if self.release_details is None:
            return NO_RELEASE_DISPLAY
        return self.release_details.display_string

    def add_scrape_target(
        self,
        website: Website,
        relative_path: str,
        target_id: Optional[uuid.UUID] = None,
    ) -> Result["Media"]:
        """Attach a new target; at most one target per Website."""
        url = website.build_url(relative_path or "")
        invariant = (
            Invariant.create()
            .satisfies(
                lambda: all(target.url != url for target in self.scrape_targets),
                Errors.scrape_target_exists(url),
            )
            .unique_within(
                website.id,
                (target.website_id for target in self.scrape_targets),
                f"scrape target website for media '{self.name}'",
            )
        )
        return (
            invariant.validate()
            .bind(
                lambda _: ScrapeTarget.create(
                    target_id or uuid.uuid4(), self.id, website, relative_path
                )
            )
            .map(
                lambda target: self.model_copy(
                    update={"scrape_targets": self.scrape_targets + (target,)}
                )
            )
        )

    def update_release_details(self, release_details: ReleaseDetails) -> Result["Media"]:
        """Replace the current release; going backwards is an invariant violation."""
        current = self.release_details
        return (
            Invariant.create()
            .satisfies(
                lambda: current is None or release_details.version >= current.version,
                Errors.invariant_violation(
                    f"release {release_details.version} of '{self.name}' is older "
                    f"than current {current.version if current else None}"
                ),
            )
            .validate_and_create(
                lambda: self.model_copy(update={"release_details": release_details})
            )
        )


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------


class Subscription(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    subscriber_id: uuid.UUID
    media_id: uuid.UUID


class Subscriber(BaseModel):
    """Someone (web user or chat user) following Media.

    ``external_identifier`` is the identity from the front end that created
    the subscriber (web login, chat user id) and never changes.
    """

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    external_identifier: str
    subscriptions: tuple[Subscription, ...] = ()

    @classmethod
    def create(cls, id: uuid.UUID, external_identifier: str) -> Result["Subscriber"]:
        return (
            Invariant.create()
            .not_null_or_whitespace(external_identifier, "external_identifier")
            .validate_and_create(
                lambda: cls(id=id, external_identifier=external_identifier)
            )
        )

    @property
    def subscribed_media_ids(self) -> tuple[uuid.UUID, ...]:
        return tuple(subscription.media_id for subscription in self.subscriptions)

    def is_subscribed_to(self, media_id: uuid.UUID) -> bool:
        return media_id in self.subscribed_media_ids

    def subscription_to(self, media_id: uuid.UUID) -> Optional[Subscription]:
        return next((s for s in self.subscriptions if s.media_id == media_id), None)

    def subscribe(self, media_id: uuid.UUID) -> "Subscriber":
        """Add a subscription; re-subscribing returns the subscriber unchanged."""
        if self.is_subscribed_to(media_id):
            return self
        subscription = Subscription(subscriber_id=self.id, media_id=media_id)
        return self.model_copy(update={"subscriptions": self.subscriptions + (subscription,)})

    def unsubscribe(self, media_id: uuid.UUID, media_name: str) -> Result["Subscriber"]:
        """Remove the subscription to ``media_id``.

        Not being subscribed is a successful no-op. ``UnsubscribeFailed`` is
        only reported when a subscription exists and removing it did not
        remove exactly one entry.
        """
        if not self.is_subscribed_to(media_id):
            return Result.ok(self)
        remaining = tuple(
            subscription
            for subscription in self.subscriptions
            if subscription.media_id != media_id
        )
        return Result.success_if(
            len(remaining) == len(self.subscriptions) - 1,
            Errors.unsubscribe_failed(media_name),
        ).map(lambda _: self.model_copy(update={"subscriptions": remaining}))


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationChannel(str, Enum):
    """Delivery channels a subscriber can be reached on.

    Inherits from str so that JSON serialisation produces the raw value.
    """

    WEB = "WEB"
    CHAT = "CHAT"


class NotificationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    subscriber_external_identifier: str
    channel: NotificationChannel
    media_name: str
    release_display: str
    release_url: str

    @property
    def message(self) -> str:
        return f"New release for {self.media_name}: {self.release_display} ({self.release_url})"
