from __future__ import annotations

import logging

from constructx.domain import Toast

logger = logging.getLogger(__name__)


class ToastCenter:
    """Queue of toasts waiting to be shown by the renderer."""

    def __init__(self) -> None:
        self._pending: list[Toast] = []

    def push(self, toast: Toast) -> Toast:
        if toast.destructive:
            logger.warning("%s: %s", toast.title, toast.description)
        else:
            logger.info("%s: %s", toast.title, toast.description)
        self._pending.append(toast)
        return toast

    def success(self, description: str, title: str = "Success") -> Toast:
        return self.push(Toast(title=title, description=description))

    def error(self, description: str, title: str = "Error") -> Toast:
        return self.push(Toast(title=title, description=description, variant="destructive"))

    def validation(self, description: str) -> Toast:
        return self.error(description, title="Validation Error")

    @property
    def pending(self) -> list[Toast]:
        return list(self._pending)

    def drain(self) -> list[Toast]:
        drained, self._pending = self._pending, []
        return drained


def failure_message(verb: str, subject: str) -> str:
    """Generic user-facing text for a failed request."""

    return f"Failed to {verb} {subject}. Please try again."


def sentence_case(subject: str) -> str:
    """Upper-case the first letter only, so acronyms such as RFI survive."""

    return subject[:1].upper() + subject[1:]
