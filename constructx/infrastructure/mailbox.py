"""Mailbox persistence for the email client page."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

from constructx.core.schema import EmailAccount, EmailFolder, EmailMessage

from .mock_data import seed_email_accounts, seed_email_folders, seed_email_messages

SENT_FOLDER = "Sent"


class MailboxRepository(Protocol):
    """Persistence contract for accounts, folders and messages."""

    def list_accounts(self) -> list[EmailAccount]: ...

    def list_folders(self, account_id: str) -> list[EmailFolder]: ...

    def sent_folder(self, account_id: str) -> EmailFolder | None: ...

    def list_messages(self, account_id: str, folder_id: str | None = None) -> list[EmailMessage]: ...

    def get_message(self, message_id: str) -> EmailMessage | None: ...

    def add_message(self, message: EmailMessage) -> EmailMessage: ...

    def update_message(self, message_id: str, **changes: object) -> EmailMessage: ...

    def delete_message(self, message_id: str) -> None: ...

    def next_message_id(self) -> str: ...

    def reset(self) -> None: ...


class InMemoryMailbox:
    """Mailbox seeded with sample accounts, kept in process memory."""

    def __init__(self) -> None:
        self._accounts: list[EmailAccount] = []
        self._folders: list[EmailFolder] = []
        self._messages: dict[str, EmailMessage] = {}
        self._counter = 0
        self.reset()

    def reset(self) -> None:
        self._accounts = seed_email_accounts()
        self._folders = seed_email_folders()
        self._messages = {message.id: message for message in seed_email_messages()}
        self._counter = len(self._messages)

    def list_accounts(self) -> list[EmailAccount]:
        return list(self._accounts)

    def list_folders(self, account_id: str) -> list[EmailFolder]:
        folders = []
        for folder in self._folders:
            if folder.account_id != account_id:
                continue
            unread = sum(
                1
                for message in self._messages.values()
                if message.folder_id == folder.id and not message.is_read and not message.is_archived
            )
            folders.append(folder.model_copy(update={"unread_count": unread}))
        return folders

    def sent_folder(self, account_id: str) -> EmailFolder | None:
        for folder in self._folders:
            if folder.account_id == account_id and folder.name == SENT_FOLDER:
                return folder
        return None

    def list_messages(self, account_id: str, folder_id: str | None = None) -> list[EmailMessage]:
        return [
            message
            for message in self._messages.values()
            if message.account_id == account_id
            and not message.is_archived
            and (folder_id is None or message.folder_id == folder_id)
        ]

    def get_message(self, message_id: str) -> EmailMessage | None:
        return self._messages.get(message_id)

    def add_message(self, message: EmailMessage) -> EmailMessage:
        self._messages[message.id] = message
        return message

    def update_message(self, message_id: str, **changes: object) -> EmailMessage:
        message = self._messages.get(message_id)
        if message is None:
            raise KeyError(message_id)
        updated = message.model_copy(update=changes)
        self._messages[message_id] = updated
        return updated

    def delete_message(self, message_id: str) -> None:
        if self._messages.pop(message_id, None) is None:
            raise KeyError(message_id)

    def next_message_id(self) -> str:
        self._counter += 1
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"email-{stamp}-{self._counter}"


__all__ = ["InMemoryMailbox", "MailboxRepository"]
