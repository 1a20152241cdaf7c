"""Application services."""

from .assistant import AssistantPanel
from .email import EmailPanel
from .pages import PageSession
from .sessions import SessionRegistry, configure_sessions, get_sessions, reset_session_state
from .wizards import WizardSession

__all__ = [
    "AssistantPanel",
    "EmailPanel",
    "PageSession",
    "SessionRegistry",
    "WizardSession",
    "configure_sessions",
    "get_sessions",
    "reset_session_state",
]
