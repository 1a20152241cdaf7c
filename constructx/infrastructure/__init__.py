"""Infrastructure layer exports."""

from .api import ApiClient, ApiError, configure_api_client, get_api_client
from .mailbox import InMemoryMailbox, MailboxRepository
from .mock_backend import InMemoryBackend

__all__ = [
    "ApiClient",
    "ApiError",
    "InMemoryBackend",
    "InMemoryMailbox",
    "MailboxRepository",
    "configure_api_client",
    "get_api_client",
]
