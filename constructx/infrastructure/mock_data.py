"""Seed payloads served while pages are not wired to a live backend."""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from constructx.core.schema import (
    RFI,
    ApprovalRequest,
    AssistantMessage,
    Bid,
    Contract,
    Conversation,
    DocumentRecord,
    EmailAccount,
    EmailFolder,
    EmailMessage,
    Invoice,
    Payment,
    Quote,
    Submittal,
)

MOCK_PROJECT_ID = "proj-1"

BID_STATUSES = ["draft", "submitted", "under-review", "won", "lost", "cancelled"]
_CLIENTS = ["Acme Construction", "BuildWell Inc.", "City Development", "Downtown Properties", "Eastside Builders"]
_USERS = ["John Doe", "Jane Smith", "Robert Johnson", "Emily Davis", "Michael Wilson"]
_BUILDINGS = ["Office Building", "Residential Complex", "Shopping Center", "Hospital Wing", "School Renovation"]
_AREAS = ["Downtown", "Westside", "Northpark", "Eastville", "Southbay"]

MOCK_BID_METRICS = {
    "totalBids": 24,
    "activeBids": 18,
    "totalValue": 4750000,
    "avgWinRate": 42,
    "byStatus": [
        {"status": "Draft", "count": 5, "value": 850000},
        {"status": "Submitted", "count": 8, "value": 1750000},
        {"status": "Under Review", "count": 5, "value": 1250000},
        {"status": "Won", "count": 3, "value": 650000},
        {"status": "Lost", "count": 2, "value": 200000},
        {"status": "Cancelled", "count": 1, "value": 50000},
    ],
}


def _iso(day: datetime) -> str:
    return day.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def generate_mock_bids(count: int = 24, *, seed: int = 2025) -> list[dict]:
    """Bids spread evenly over every pipeline status; values are seeded so runs repeat."""

    rng = random.Random(seed)
    base = datetime(2025, 6, 1, tzinfo=timezone.utc)
    bids: list[dict] = []
    for i in range(count):
        bid = Bid(
            id=f"bid-{i + 1}",
            name=f"Bid {i + 1} - {_BUILDINGS[i % 5]}",
            bid_number=f"BID-2025-{1000 + i}",
            client_id=f"client-{(i % 5) + 1}",
            client_name=_CLIENTS[i % len(_CLIENTS)],
            description=f"Proposal for construction project in {_AREAS[i % 5]}",
            status=BID_STATUSES[i % len(BID_STATUSES)],
            submission_date=_iso(base + timedelta(days=i)),
            due_date=_iso(base + timedelta(days=i + 14)),
            estimated_value=rng.randint(50000, 550000),
            final_value=rng.randint(50000, 550000) if i % 3 == 0 else None,
            estimated_start_date=_iso(base + timedelta(days=92 + i)),
            estimated_duration=rng.randint(1, 12),
            probability=rng.randint(1, 100),
            assigned_to=f"user-{(i % 5) + 1}",
            assigned_to_name=_USERS[i % len(_USERS)],
            created_at=_iso(base - timedelta(days=31 - i)),
            updated_at=_iso(base - timedelta(days=22 - i)),
            tags=[
                ["commercial", "new-construction", "high-priority"][i % 3],
                ["urban", "suburban", "rural"][i % 3],
            ],
        )
        bids.append(bid.to_record())
    return bids


def _rfis() -> list[dict]:
    rows = [
        RFI(id="rfi-1", project_id=MOCK_PROJECT_ID, rfi_number="RFI-001", title="Foundation rebar spacing",
            status="Submitted", priority="High", category="Structural", due_date="2025-06-20",
            submitted_date="2025-06-10", submitted_by="John Doe", assigned_to="Jane Smith"),
        RFI(id="rfi-2", project_id=MOCK_PROJECT_ID, rfi_number="RFI-002", title="Lobby ceiling height",
            status="Under Review", priority="Medium", category="Architectural", due_date="2025-06-25",
            submitted_date="2025-06-12", submitted_by="Emily Davis", assigned_to="Robert Johnson"),
        RFI(id="rfi-3", project_id=MOCK_PROJECT_ID, rfi_number="RFI-003", title="HVAC duct routing",
            status="Responded", priority="Low", category="Mechanical", due_date="2025-06-18",
            submitted_date="2025-06-05", submitted_by="Michael Wilson", assigned_to="Jane Smith"),
        RFI(id="rfi-4", project_id=MOCK_PROJECT_ID, rfi_number="RFI-004", title="Curtain wall anchors",
            status="Draft", priority="Medium", category="Structural", due_date="2025-07-02"),
        RFI(id="rfi-5", project_id=MOCK_PROJECT_ID, rfi_number="RFI-005", title="Fire stopping details",
            status="Closed", priority="High", category="Life Safety", due_date="2025-06-01",
            submitted_date="2025-05-20", closed_date="2025-06-02"),
    ]
    return [row.to_record() for row in rows]


def _submittals() -> list[dict]:
    rows = [
        Submittal(id="sub-1", project_id=MOCK_PROJECT_ID, submittal_number="SUB-001", title="Structural steel shop drawings",
                  status="Under Review", specification_section="05 12 00", category="Shop Drawings",
                  ball_in_court="Architect", due_date="2025-06-22", submitted_date="2025-06-08"),
        Submittal(id="sub-2", project_id=MOCK_PROJECT_ID, submittal_number="SUB-002", title="Concrete mix design",
                  status="Approved", specification_section="03 30 00", category="Product Data",
                  ball_in_court="None", due_date="2025-06-10", submitted_date="2025-05-28"),
        Submittal(id="sub-3", project_id=MOCK_PROJECT_ID, submittal_number="SUB-003", title="Roofing membrane samples",
                  status="Revise and Resubmit", specification_section="07 54 00", category="Samples",
                  ball_in_court="Contractor", due_date="2025-06-30"),
        Submittal(id="sub-4", project_id=MOCK_PROJECT_ID, submittal_number="SUB-004", title="Door hardware schedule",
                  status="Draft", specification_section="08 71 00", category="Product Data", due_date="2025-07-05"),
    ]
    return [row.to_record() for row in rows]


def _invoices() -> list[dict]:
    rows = [
        Invoice(id="inv-1", project_id=MOCK_PROJECT_ID, invoice_number="INV-2025-001", title="Progress billing #1",
                type="Outgoing Client Invoice", client="City Development", status="Paid", total_amount=125000,
                amount_paid=125000, amount_due=0, issue_date="2025-04-30", due_date="2025-05-30"),
        Invoice(id="inv-2", project_id=MOCK_PROJECT_ID, invoice_number="INV-2025-002", title="Progress billing #2",
                type="Outgoing Client Invoice", client="City Development", status="Sent", total_amount=98000,
                amount_paid=0, amount_due=98000, issue_date="2025-05-31", due_date="2025-06-30"),
        Invoice(id="inv-3", project_id=MOCK_PROJECT_ID, invoice_number="VEN-7781", title="Ready-mix concrete",
                type="Incoming Vendor Invoice", vendor="Metro Concrete", status="Overdue", total_amount=18450,
                amount_paid=5000, amount_due=13450, issue_date="2025-04-15", due_date="2025-05-15"),
        Invoice(id="inv-4", project_id=MOCK_PROJECT_ID, invoice_number="VEN-7802", title="Scaffolding rental",
                type="Incoming Vendor Invoice", vendor="SkyHigh Rentals", status="Due", total_amount=6200,
                amount_paid=0, amount_due=6200, issue_date="2025-06-01", due_date="2025-06-15"),
    ]
    return [row.to_record() for row in rows]


def _payments() -> list[dict]:
    rows = [
        Payment(id="pay-1", project_id=MOCK_PROJECT_ID, payment_number="PAY-001", type="Incoming", amount=125000,
                status="Completed", payment_date="2025-05-28", method="Bank Transfer",
                related_entity_type="Invoice", related_entity_id="inv-1"),
        Payment(id="pay-2", project_id=MOCK_PROJECT_ID, payment_number="PAY-002", type="Outgoing", amount=5000,
                status="Completed", payment_date="2025-05-20", method="Check",
                related_entity_type="Invoice", related_entity_id="inv-3"),
        Payment(id="pay-3", project_id=MOCK_PROJECT_ID, payment_number="PAY-003", type="Outgoing", amount=6200,
                status="Pending", payment_date="2025-06-14", method="ACH", notes="Scaffolding June"),
    ]
    return [row.to_record() for row in rows]


def _quotes() -> list[dict]:
    rows = [
        Quote(id="quo-1", project_id=MOCK_PROJECT_ID, quote_number="Q-2025-010", title="Tenant fit-out level 3",
              type="Client Quote", recipient_company="Downtown Properties", status="Sent",
              total_amount=212000, issue_date="2025-06-01", valid_until="2025-07-01"),
        Quote(id="quo-2", project_id=MOCK_PROJECT_ID, quote_number="Q-2025-011", title="Elevator modernisation",
              type="Vendor Quote Request", vendor="LiftCo", status="Viewed",
              total_amount=87000, issue_date="2025-06-03", valid_until="2025-06-30"),
        Quote(id="quo-3", project_id=MOCK_PROJECT_ID, quote_number="Q-2025-007", title="Parking deck coating",
              type="Client Quote", recipient_company="City Development", status="Accepted",
              total_amount=54000, issue_date="2025-05-10", valid_until="2025-06-10"),
    ]
    return [row.to_record() for row in rows]


def _approvals() -> list[dict]:
    rows = [
        ApprovalRequest(id="apr-1", project_id=MOCK_PROJECT_ID, title="Change order CO-004", entity_type="ChangeOrder",
                        entity_id="co-4", status="Pending", priority="High", requested_by="John Doe",
                        requested_date="2025-06-10", due_date="2025-06-17"),
        ApprovalRequest(id="apr-2", project_id=MOCK_PROJECT_ID, title="Invoice INV-2025-002", entity_type="Invoice",
                        entity_id="inv-2", status="In Progress", requested_by="Emily Davis",
                        requested_date="2025-06-01", due_date="2025-06-08"),
        ApprovalRequest(id="apr-3", project_id=MOCK_PROJECT_ID, title="Steel shop drawings", entity_type="Submittal",
                        entity_id="sub-1", status="Approved", requested_by="Jane Smith",
                        requested_date="2025-05-25", due_date="2025-06-01"),
    ]
    return [row.to_record() for row in rows]


def _documents() -> list[dict]:
    rows = [
        DocumentRecord(id="doc-1", project_id=MOCK_PROJECT_ID, name="Site plan rev C.pdf", category="Drawings",
                       folder_id="fold-1", file_type="application/pdf", size=2483200, status="Approved",
                       uploaded_by="Jane Smith", updated_at="2025-06-11T08:30:00Z"),
        DocumentRecord(id="doc-2", project_id=MOCK_PROJECT_ID, name="Geotechnical report.pdf", category="Reports",
                       folder_id="fold-2", file_type="application/pdf", size=5120000, status="In Review",
                       uploaded_by="Robert Johnson", updated_at="2025-06-13T14:10:00Z"),
        DocumentRecord(id="doc-3", project_id=MOCK_PROJECT_ID, name="Safety plan.docx", category="Plans",
                       folder_id="fold-2", file_type="application/msword", size=340000, status="Draft",
                       uploaded_by="Michael Wilson", updated_at="2025-06-02T09:00:00Z"),
    ]
    return [row.to_record() for row in rows]


def _contracts() -> list[dict]:
    rows = [
        Contract(id="con-1", project_id=MOCK_PROJECT_ID, title="General construction agreement",
                 project_name="Project Alpha", client_name="City Development", contractor_name="ConstructX Builders",
                 status="Active", value=2400000, start_date="2025-03-01", end_date="2026-02-28"),
        Contract(id="con-2", project_id=MOCK_PROJECT_ID, title="Electrical subcontract",
                 project_name="Project Alpha", contract_type="Subcontract", client_name="ConstructX Builders",
                 contractor_name="Bright Electric", status="Pending Signature", value=310000, start_date="2025-07-01"),
    ]
    return [row.to_record() for row in rows]


def _assistant() -> dict[str, list[dict]]:
    conversation = Conversation(
        id="conv-1", project_id=MOCK_PROJECT_ID, title="Schedule risks", created_at="2025-06-14T08:00:00Z"
    ).to_record()
    conversation["messages"] = [
        AssistantMessage(id="msg-1", conversation_id="conv-1", role="user",
                         content="Which RFIs are blocking the steel package?",
                         created_at="2025-06-14T08:00:00Z").model_dump(by_alias=True),
        AssistantMessage(id="msg-2", conversation_id="conv-1", role="assistant",
                         content="RFI-001 (foundation rebar spacing) is still awaiting a response.",
                         created_at="2025-06-14T08:00:05Z").model_dump(by_alias=True),
    ]
    actions = [
        {"id": "act-1", "projectId": MOCK_PROJECT_ID, "status": "pending", "type": "reminder",
         "title": "Send reminder for RFI-001", "entityType": "RFI", "entityId": "rfi-1"},
        {"id": "act-2", "projectId": MOCK_PROJECT_ID, "status": "pending", "type": "follow-up",
         "title": "Follow up on overdue invoice VEN-7781", "entityType": "Invoice", "entityId": "inv-3"},
    ]
    insights = [
        {"id": "ins-1", "projectId": MOCK_PROJECT_ID, "status": "new", "isRead": False, "severity": "warning",
         "title": "Two submittals are due within a week"},
    ]
    return {"conversations": [conversation], "actions": actions, "insights": insights}


def seed_collections() -> dict[str, list[dict]]:
    """Mock records keyed by REST collection name."""

    return {
        "bids": generate_mock_bids(),
        "rfis": _rfis(),
        "submittals": _submittals(),
        "invoices": _invoices(),
        "payments": _payments(),
        "quotes": _quotes(),
        "approval-requests": _approvals(),
        "documents": _documents(),
        "contracts": _contracts(),
        **_assistant(),
    }


def seed_email_accounts() -> list[EmailAccount]:
    return [
        EmailAccount(id="acc-1", email_address="user@company.com", is_default=True),
        EmailAccount(id="acc-2", email_address="project@company.com"),
    ]


def seed_email_folders() -> list[EmailFolder]:
    return [
        EmailFolder(id="folder-1", name="Inbox", account_id="acc-1", is_system_folder=True),
        EmailFolder(id="folder-2", name="Sent", account_id="acc-1", is_system_folder=True),
        EmailFolder(id="folder-3", name="Drafts", account_id="acc-1", is_system_folder=True),
        EmailFolder(id="folder-4", name="Project X", account_id="acc-1"),
        EmailFolder(id="folder-5", name="Inbox", account_id="acc-2", is_system_folder=True),
    ]


def seed_email_messages() -> list[EmailMessage]:
    return [
        EmailMessage(
            id="email-1", account_id="acc-1", folder_id="folder-1", project_id=MOCK_PROJECT_ID,
            subject="Meeting Minutes - Project Alpha", sender="john.doe@example.com",
            recipients=["user@company.com"], body="Please find attached the minutes from our last meeting.",
            received_at="2025-06-15T10:05:00Z", tags=["Urgent", "Project Alpha"],
            attachments=[{"name": "minutes.pdf", "fileSize": 102400, "fileType": "application/pdf"}],
        ),
        EmailMessage(
            id="email-2", account_id="acc-1", folder_id="folder-1",
            subject="Weekly Report Request", sender="manager@example.com",
            recipients=["user@company.com"], body="Please submit your weekly report by EOD Friday.",
            received_at="2025-06-14T15:05:00Z", is_read=True, is_flagged=True, tags=["Action Required"],
        ),
        EmailMessage(
            id="email-3", account_id="acc-1", folder_id="folder-1", project_id=MOCK_PROJECT_ID,
            subject="RFI-005 Response", sender="architect@example.com",
            recipients=["user@company.com"], body="Response to RFI-005 is attached.",
            received_at="2025-06-13T09:05:00Z", tags=["RFI"],
            attachments=[{"name": "RFI-005_Response.pdf", "fileSize": 204800, "fileType": "application/pdf"}],
        ),
        EmailMessage(
            id="email-4", account_id="acc-1", folder_id="folder-3", status="draft",
            subject="Draft: Project Proposal", sender="user@company.com",
            recipients=["client@example.com"], body="Here is the draft proposal for your review.",
            received_at="2025-06-12T11:00:00Z", is_read=True, is_sent=True, tags=["Draft"],
        ),
    ]


__all__ = [
    "BID_STATUSES",
    "MOCK_BID_METRICS",
    "MOCK_PROJECT_ID",
    "generate_mock_bids",
    "seed_collections",
    "seed_email_accounts",
    "seed_email_folders",
    "seed_email_messages",
]
