"""Representative record shapes returned by the upstream API.

Pages pass upstream payloads through untouched as dictionaries. These models
are used where the service produces records itself (mock payloads, the
in-memory mailbox) so that those records match what the API would send.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    id: str
    status: str
    tags: list[str] = Field(default_factory=list)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Bid(RecordModel):
    name: str
    bid_number: str
    client_id: str | None = None
    client_name: str = ""
    description: str = ""
    submission_date: str | None = None
    due_date: str | None = None
    estimated_value: float = 0
    final_value: float | None = None
    estimated_start_date: str | None = None
    estimated_duration: int | None = None
    probability: int = 0
    assigned_to: str | None = None
    assigned_to_name: str = ""
    created_at: str | None = None
    updated_at: str | None = None


class RFI(RecordModel):
    project_id: str
    rfi_number: str
    title: str
    description: str = ""
    priority: Literal["Low", "Medium", "High"] = "Medium"
    category: str = ""
    due_date: str | None = None
    submitted_date: str | None = None
    closed_date: str | None = None
    submitted_by: str = ""
    assigned_to: str = ""
    cost_impact: bool = False
    schedule_impact: bool = False


class Submittal(RecordModel):
    project_id: str
    submittal_number: str
    title: str
    description: str = ""
    specification_section: str = ""
    category: str = ""
    priority: Literal["Low", "Medium", "High"] = "Medium"
    ball_in_court: str = "None"
    due_date: str | None = None
    submitted_date: str | None = None


class Invoice(RecordModel):
    project_id: str
    invoice_number: str
    title: str
    type: Literal["Outgoing Client Invoice", "Incoming Vendor Invoice"]
    client: str | None = None
    vendor: str | None = None
    total_amount: float = 0
    amount_paid: float = 0
    amount_due: float = 0
    issue_date: str | None = None
    due_date: str | None = None


class Payment(RecordModel):
    project_id: str
    payment_number: str
    type: Literal["Incoming", "Outgoing"]
    amount: float = 0
    payment_date: str | None = None
    method: str = ""
    notes: str = ""
    related_entity_type: str = ""
    related_entity_id: str | None = None


class Quote(RecordModel):
    project_id: str
    quote_number: str
    title: str
    type: Literal["Client Quote", "Vendor Quote Request"]
    recipient_company: str | None = None
    vendor: str | None = None
    total_amount: float = 0
    issue_date: str | None = None
    valid_until: str | None = None


class ApprovalRequest(RecordModel):
    project_id: str
    title: str
    description: str = ""
    entity_type: str
    entity_id: str | None = None
    priority: Literal["Low", "Medium", "High", "Critical"] = "Medium"
    requested_by: str = ""
    requested_date: str | None = None
    due_date: str | None = None


class DocumentRecord(RecordModel):
    project_id: str
    name: str
    description: str = ""
    category: str = ""
    folder_id: str | None = None
    file_type: str = ""
    size: int = 0
    uploaded_by: str = ""
    updated_at: str | None = None


class Contract(RecordModel):
    project_id: str | None = None
    title: str
    project_name: str = ""
    contract_type: str = "Construction"
    client_name: str = ""
    contractor_name: str = ""
    value: float = 0
    start_date: str | None = None
    end_date: str | None = None


class EmailAccount(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    email_address: str
    is_default: bool = False
    status: str = "Connected"


class EmailFolder(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    name: str
    account_id: str
    unread_count: int = 0
    is_system_folder: bool = False


class EmailMessage(RecordModel):
    status: str = "received"
    account_id: str
    folder_id: str
    project_id: str | None = None
    sender: str
    recipients: list[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""
    is_read: bool = False
    is_flagged: bool = False
    is_archived: bool = False
    is_sent: bool = False
    received_at: str | None = None
    attachments: list[dict] = Field(default_factory=list)


class Conversation(RecordModel):
    status: str = "active"
    title: str = "New conversation"
    project_id: str | None = None
    created_at: str | None = None


class AssistantMessage(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    id: str
    conversation_id: str
    role: Literal["user", "assistant"] = "user"
    content: str
    created_at: str | None = None
