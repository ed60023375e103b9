"""Site and contact settings, the contact inbox, and public contact submissions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.domain.document import DocumentController
from portfolio_cms.domain.errors import FetchError, MutationError, UnknownEntityError
from portfolio_cms.domain.ports.remote_store import RemoteStoreError
from portfolio_cms.domain.state import ActivityTracker
from portfolio_cms.domain.validation import FieldChecks, blank_to_none

if TYPE_CHECKING:
    from collections.abc import Callable

    from portfolio_cms.domain.model import (
        ContactMessage,
        ContactSettings,
        EntityKey,
        SiteSettings,
    )
    from portfolio_cms.domain.ports import ConfirmAction, DocumentStore, InboxStore, Notifier
    from portfolio_cms.domain.state import ControllerState

log = getLogger(__name__)

CONTACT_MESSAGE_MIN_LENGTH = 10


def prepare_site_settings(settings: SiteSettings) -> SiteSettings:
    prepared = replace(
        settings,
        site_title=settings.site_title.strip(),
        site_tagline=blank_to_none(settings.site_tagline),
        github_url=blank_to_none(settings.github_url),
        linkedin_url=blank_to_none(settings.linkedin_url),
        twitter_url=blank_to_none(settings.twitter_url),
        portfolio_url=blank_to_none(settings.portfolio_url),
        footer_text=settings.footer_text.strip(),
    )
    checks = FieldChecks()
    checks.length(
        "site_title", prepared.site_title, label="Site title", min_length=1, max_length=100
    )
    checks.length("site_tagline", prepared.site_tagline, label="Tagline", max_length=200)
    checks.url("github_url", prepared.github_url, label="GitHub URL")
    checks.url("linkedin_url", prepared.linkedin_url, label="LinkedIn URL")
    checks.url("twitter_url", prepared.twitter_url, label="Twitter URL")
    checks.url("portfolio_url", prepared.portfolio_url, label="Portfolio URL")
    checks.length("footer_text", prepared.footer_text, label="Footer text", max_length=500)
    checks.raise_if_any()
    return prepared


def prepare_contact_settings(settings: ContactSettings) -> ContactSettings:
    prepared = replace(
        settings,
        heading=settings.heading.strip(),
        description=settings.description.strip(),
        email=settings.email.strip(),
        button_text=settings.button_text.strip(),
        # a hidden subject field cannot be required
        require_subject=settings.require_subject and settings.show_subject_field,
    )
    checks = FieldChecks()
    checks.length("heading", prepared.heading, label="Heading", min_length=1, max_length=100)
    checks.length("description", prepared.description, label="Description", max_length=500)
    checks.email("email", prepared.email, label="Email")
    checks.length(
        "button_text",
        prepared.button_text,
        label="Button text",
        min_length=1,
        max_length=50,
    )
    checks.raise_if_any()
    return prepared


class SettingsEditor[TSettings]:
    """Load/save for one settings document, validated by ``prepare`` before sending."""

    def __init__(
        self,
        *,
        store: DocumentStore[TSettings, TSettings],
        notifier: Notifier,
        section: str,
        prepare: Callable[[TSettings], TSettings],
    ) -> None:
        self.document: DocumentController[TSettings, TSettings] = DocumentController(
            store=store, notifier=notifier, section=section
        )
        self._prepare = prepare

    @property
    def settings(self) -> TSettings | None:
        return self.document.document

    async def load(self) -> TSettings | None:
        return await self.document.load()

    async def save(self, settings: TSettings) -> TSettings | None:
        return await self.document.save(self._prepare(settings))

    def dispose(self) -> None:
        self.document.dispose()


def site_settings_editor(
    *,
    store: DocumentStore[SiteSettings, SiteSettings],
    notifier: Notifier,
) -> SettingsEditor[SiteSettings]:
    return SettingsEditor(
        store=store, notifier=notifier, section="site settings", prepare=prepare_site_settings
    )


def contact_settings_editor(
    *,
    store: DocumentStore[ContactSettings, ContactSettings],
    notifier: Notifier,
) -> SettingsEditor[ContactSettings]:
    return SettingsEditor(
        store=store,
        notifier=notifier,
        section="contact settings",
        prepare=prepare_contact_settings,
    )


class MessagesInbox:
    """Messages sent through the public contact form, newest first as served."""

    def __init__(self, *, store: InboxStore, notifier: Notifier, confirm: ConfirmAction) -> None:
        self._store = store
        self._notifier = notifier
        self._confirm = confirm
        self._messages: list[ContactMessage] = []
        self._unread = 0
        self._activity = ActivityTracker()

    @property
    def messages(self) -> tuple[ContactMessage, ...]:
        return tuple(self._messages)

    @property
    def unread_count(self) -> int:
        return self._unread

    @property
    def state(self) -> ControllerState:
        return self._activity.state

    def get(self, key: EntityKey) -> ContactMessage:
        for message in self._messages:
            if message.id == key:
                return message
        raise UnknownEntityError(f"No message with id {key!r}")

    async def load(self) -> tuple[ContactMessage, ...]:
        with self._activity.loading():
            try:
                messages, unread = await asyncio.gather(
                    self._store.fetch_messages(), self._store.unread_count()
                )
            except RemoteStoreError as exc:
                message = "Failed to load messages"
                log.warning("Loading messages failed: %s", exc.message)
                self._activity.fail(message)
                self._notifier.error(message)
                raise FetchError(message) from exc
        self._messages = list(messages)
        self._unread = unread
        return self.messages

    async def mark_read(self, key: EntityKey) -> ContactMessage:
        current = self.get(key)
        if current.is_read:
            return current
        with self._activity.saving():
            try:
                await self._store.mark_read(key)
            except RemoteStoreError as exc:
                raise self._failed("Failed to mark as read", "update", exc) from exc
        updated = replace(current, is_read=True)
        self._messages = [updated if message.id == key else message for message in self._messages]
        self._unread = max(0, self._unread - 1)
        return updated

    async def mark_all_read(self) -> None:
        with self._activity.saving():
            try:
                await self._store.mark_all_read()
            except RemoteStoreError as exc:
                raise self._failed("Failed to mark all as read", "update", exc) from exc
        self._messages = [replace(message, is_read=True) for message in self._messages]
        self._unread = 0
        self._notifier.success("All messages marked as read")

    async def delete(self, key: EntityKey) -> bool:
        current = self.get(key)
        if not await self._confirm("Delete this message? This cannot be undone."):
            return False
        with self._activity.saving():
            try:
                await self._store.delete(key)
            except RemoteStoreError as exc:
                raise self._failed("Failed to delete message", "delete", exc) from exc
        self._messages = [message for message in self._messages if message.id != key]
        if not current.is_read:
            self._unread = max(0, self._unread - 1)
        self._notifier.success("Message deleted")
        return True

    def _failed(self, message: str, action: str, exc: RemoteStoreError) -> MutationError:
        log.warning("%s: %s", message, exc.message)
        self._activity.fail(message)
        self._notifier.error(message)
        return MutationError(message, action=action, status=exc.status)


@dataclass(frozen=True, kw_only=True)
class ContactSubmission:
    name: str
    email: str
    message: str
    subject: str | None = None


def prepare_submission(
    submission: ContactSubmission,
    settings: ContactSettings | None = None,
) -> ContactSubmission:
    """Trim and validate a public contact-form submission.

    The subject is dropped when the form does not show it, and required only
    when the contact settings say so.
    """

    show_subject = settings is None or settings.show_subject_field
    prepared = replace(
        submission,
        name=submission.name.strip(),
        email=submission.email.strip(),
        message=submission.message.strip(),
        subject=blank_to_none(submission.subject) if show_subject else None,
    )
    checks = FieldChecks()
    checks.length("name", prepared.name, label="Name", min_length=2)
    checks.email("email", prepared.email, label="Email")
    if settings is not None and settings.show_subject_field and settings.require_subject:
        checks.required("subject", prepared.subject, label="Subject")
    checks.length(
        "message",
        prepared.message,
        label="Message",
        min_length=CONTACT_MESSAGE_MIN_LENGTH,
    )
    checks.raise_if_any()
    return prepared
