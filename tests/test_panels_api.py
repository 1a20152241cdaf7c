import asyncio
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.application import EmailPanel, SessionRegistry, reset_session_state
from constructx.core.catalog import load_catalog
from constructx.core.settings import Settings
from constructx.infrastructure import ApiClient, InMemoryBackend, InMemoryMailbox
from constructx.infrastructure.mock_data import seed_collections
from constructx.services import EmailService, ServiceRegistry


@pytest.fixture(autouse=True)
def reset_state():
    reset_session_state()
    yield
    reset_session_state()


@pytest.fixture()
def backend():
    return InMemoryBackend(seed_collections())


@pytest.fixture()
def client(backend):
    from constructx.app import create_app

    api = ApiClient("http://upstream.test/api", http_client=httpx.AsyncClient(transport=backend.transport()))
    services = ServiceRegistry(api, load_catalog(), InMemoryMailbox())
    app = create_app(Settings(), SessionRegistry(services))
    with TestClient(app) as test_client:
        yield test_client


def _ids(items: list[dict]) -> list[str]:
    return [item["id"] for item in items]


def test_mailbox_opens_default_account_inbox(client):
    mailbox = client.get("/api/email").json()

    assert mailbox["account_id"] == "acc-1"
    assert mailbox["folder_id"] == "folder-1"
    assert _ids(mailbox["messages"]) == ["email-1", "email-2", "email-3"]
    inbox = next(folder for folder in mailbox["folders"] if folder["id"] == "folder-1")
    assert inbox["unreadCount"] == 2
    assert mailbox["error"] is None


def test_mailbox_filters_by_read_and_flag(client):
    unread = client.get("/api/email", params={"read": "false"}).json()
    assert _ids(unread["messages"]) == ["email-1", "email-3"]

    flagged = client.get("/api/email", params={"flagged": "true"}).json()
    assert _ids(flagged["messages"]) == ["email-2"]

    searched = client.get("/api/email", params={"query": "rfi-005"}).json()
    assert _ids(searched["messages"]) == ["email-3"]


def test_message_actions_refresh_the_list(client):
    client.get("/api/email")

    read = client.post("/api/email/messages/email-1/read").json()
    assert read["toasts"][0]["description"] == "Email marked as read successfully."
    assert next(message for message in read["messages"] if message["id"] == "email-1")["isRead"] is True

    archived = client.post("/api/email/messages/email-2/archive").json()
    assert "email-2" not in _ids(archived["messages"])

    deleted = client.post("/api/email/messages/email-3/delete").json()
    assert deleted["toasts"][0]["description"] == "Email deleted successfully."
    assert _ids(deleted["messages"]) == ["email-1"]

    missing = client.post("/api/email/messages/email-3/flag").json()
    assert missing["toasts"][0]["description"] == "Failed to update email. Please try again."
    assert client.post("/api/email/messages/email-1/snooze").status_code == 400


def test_compose_sends_into_sent_folder(client):
    client.get("/api/email")

    composed = client.post(
        "/api/email/messages",
        json={"to": "client@example.com", "subject": "Proposal", "body": "Attached."},
    ).json()
    assert composed["toasts"][0]["description"] == "Email sent successfully."
    assert composed["sent"]["folderId"] == "folder-2"

    sent = client.get("/api/email", params={"account_id": "acc-1", "folder_id": "folder-2"}).json()
    assert _ids(sent["messages"]) == [composed["sent"]["id"]]

    assert client.post("/api/email/messages", json={"subject": "nobody"}).status_code == 400


def test_other_account_defaults_to_its_inbox(client):
    mailbox = client.get("/api/email", params={"account_id": "acc-2"}).json()
    assert mailbox["folder_id"] == "folder-5"
    assert mailbox["messages"] == []


def test_assistant_overview_and_conversation(client):
    panel = client.get("/api/assistant", params={"project_id": "proj-1"}).json()
    assert _ids(panel["conversations"]) == ["conv-1"]
    assert _ids(panel["actions"]) == ["act-1", "act-2"]
    assert _ids(panel["insights"]) == ["ins-1"]
    assert panel["messages"] == []

    opened = client.get("/api/assistant", params={"project_id": "proj-1", "conversation_id": "conv-1"}).json()
    assert _ids(opened["messages"]) == ["msg-1", "msg-2"]

    replied = client.post("/api/assistant/conversations/conv-1/messages", json={"content": "Any overdue invoices?"}).json()
    assert replied["messages"][-1]["content"] == "Any overdue invoices?"
    assert client.post("/api/assistant/conversations/conv-1/messages", json={"content": "  "}).status_code == 400


def test_assistant_actions_and_insights(client):
    client.get("/api/assistant", params={"project_id": "proj-1"})

    accepted = client.post("/api/assistant/actions/act-1/accept").json()
    assert accepted["toasts"][0]["description"] == "Action accepted."
    assert next(item for item in accepted["actions"] if item["id"] == "act-1")["status"] == "accepted"

    rejected = client.post("/api/assistant/actions/act-2/reject").json()
    assert rejected["toasts"][0]["description"] == "Action rejected."
    assert client.post("/api/assistant/actions/act-2/postpone").status_code == 400

    insights = client.post("/api/assistant/insights/ins-1/read").json()
    assert insights["insights"][0]["isRead"] is True


def test_assistant_create_and_delete_conversation(client):
    client.get("/api/assistant", params={"project_id": "proj-1"})

    created = client.post("/api/assistant/conversations", json={"title": "Budget review"}).json()
    assert created["created"]["projectId"] == "proj-1"
    assert created["conversation_id"] == created["created"]["id"]
    assert len(created["conversations"]) == 2

    deleted = client.delete("/api/assistant/conversations/conv-1").json()
    assert _ids(deleted["conversations"]) == [created["created"]["id"]]
    assert deleted["toasts"][0]["description"] == "Conversation deleted successfully."


def test_assistant_overview_is_all_or_nothing(client, backend):
    client.get("/api/assistant", params={"project_id": "proj-1"})
    backend.fail("GET", "/ai/insights")

    panel = client.get("/api/assistant", params={"project_id": "proj-2"}).json()

    assert panel["project_id"] == "proj-2"
    assert panel["error"] == "Failed to load assistant data. Please try again."
    assert _ids(panel["conversations"]) == ["conv-1"]
    assert panel["toasts"][0]["variant"] == "destructive"


def test_mailbox_sort_direction_returns_to_newest_first(client):
    assert client.get("/api/email").json()["sort"] == {"key": "receivedAt", "direction": "desc"}

    by_sender = client.get("/api/email", params={"sort": "sender"}).json()
    assert by_sender["sort"] == {"key": "sender", "direction": "asc"}

    newest = client.get("/api/email", params={"sort": "receivedAt", "direction": "desc"}).json()
    assert newest["sort"] == {"key": "receivedAt", "direction": "desc"}
    assert _ids(newest["messages"]) == ["email-1", "email-2", "email-3"]

    oldest = client.get("/api/email", params={"direction": "asc"}).json()
    assert _ids(oldest["messages"]) == ["email-3", "email-2", "email-1"]
    assert client.get("/api/email", params={"direction": "sideways"}).status_code == 400


class CountingEmailService(EmailService):
    def __init__(self, mailbox):
        super().__init__(mailbox)
        self.folder_calls = 0

    async def folders(self, account_id):
        self.folder_calls += 1
        return await super().folders(account_id)


def test_default_inbox_lists_folders_once():
    service = CountingEmailService(InMemoryMailbox())
    panel = EmailPanel(service, load_catalog().entity("emails"))

    asyncio.run(panel.open())
    assert service.folder_calls == 1
    assert panel.snapshot()["folder_id"] == "folder-1"

    asyncio.run(panel.open("acc-1", "folder-2"))
    assert service.folder_calls == 2
