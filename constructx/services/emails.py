"""Email client backed by the mailbox repository until the mail API exists."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from constructx.core.schema import EmailMessage
from constructx.infrastructure.api import ApiError
from constructx.infrastructure.mailbox import MailboxRepository

from .base import UnknownActionError

logger = logging.getLogger(__name__)

MESSAGE_ACTIONS: dict[str, dict[str, Any]] = {
    "read": {"is_read": True},
    "unread": {"is_read": False},
    "flag": {"is_flagged": True},
    "unflag": {"is_flagged": False},
    "archive": {"is_archived": True},
}


class EmailService:
    def __init__(self, mailbox: MailboxRepository) -> None:
        self._mailbox = mailbox

    async def accounts(self) -> list[dict]:
        return [account.model_dump(by_alias=True) for account in self._mailbox.list_accounts()]

    async def folders(self, account_id: str) -> list[dict]:
        return [folder.model_dump(by_alias=True) for folder in self._mailbox.list_folders(account_id)]

    async def messages(
        self,
        account_id: str,
        folder_id: str | None = None,
        project_id: str | None = None,
    ) -> list[dict]:
        messages = self._mailbox.list_messages(account_id, folder_id)
        if project_id:
            messages = [message for message in messages if message.project_id == project_id]
        return [message.to_record() for message in messages]

    async def send(self, account_id: str, payload: Mapping[str, Any], project_id: str | None = None) -> dict:
        sent_folder = self._mailbox.sent_folder(account_id)
        recipients = payload.get("recipients") or payload.get("to") or []
        if isinstance(recipients, str):
            recipients = [item.strip() for item in recipients.split(",") if item.strip()]
        accounts = {account.id: account for account in self._mailbox.list_accounts()}
        if account_id not in accounts:
            raise ApiError(f"unknown email account {account_id}", status_code=404)
        message = EmailMessage(
            id=self._mailbox.next_message_id(),
            status="sent",
            account_id=account_id,
            folder_id=sent_folder.id if sent_folder else "sent",
            project_id=project_id,
            sender=accounts[account_id].email_address,
            recipients=list(recipients),
            subject=str(payload.get("subject") or ""),
            body=str(payload.get("body") or ""),
            is_read=True,
            is_sent=True,
            received_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        )
        return self._mailbox.add_message(message).to_record()

    async def perform(self, message_id: str, action: str) -> dict | None:
        """Apply a message action; ``delete`` returns None."""

        try:
            if action == "delete":
                self._mailbox.delete_message(message_id)
                return None
            try:
                changes = MESSAGE_ACTIONS[action]
            except KeyError as exc:
                raise UnknownActionError(f"emails have no action {action!r}") from exc
            return self._mailbox.update_message(message_id, **changes).to_record()
        except KeyError as exc:
            raise ApiError(f"email {message_id} not found", status_code=404) from exc
