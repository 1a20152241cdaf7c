"""REST clients per upstream resource."""

from __future__ import annotations

from constructx.core.catalog import Catalog, CatalogError
from constructx.infrastructure.api import ApiClient
from constructx.infrastructure.mailbox import MailboxRepository

from .approvals import ApprovalService
from .assistant import AssistantService
from .base import ResourceService, UnknownActionError, as_list
from .bids import BidService
from .contracts import ContractService
from .dashboard import DashboardService
from .documents import DocumentService
from .emails import EmailService
from .invoices import InvoiceService
from .payments import PaymentService
from .quotes import QuoteService
from .rfis import RFIService
from .submittals import SubmittalService

SERVICE_CLASSES: dict[str, type[ResourceService]] = {
    "bids": BidService,
    "rfis": RFIService,
    "submittals": SubmittalService,
    "invoices": InvoiceService,
    "payments": PaymentService,
    "quotes": QuoteService,
    "approvals": ApprovalService,
    "documents": DocumentService,
    "contracts": ContractService,
}


class ServiceRegistry:
    """Builds one service per catalog entity on a shared API client."""

    def __init__(
        self,
        api: ApiClient,
        catalog: Catalog,
        mailbox: MailboxRepository,
        *,
        use_mock_data: bool = False,
    ) -> None:
        self.api = api
        self.catalog = catalog
        self.email = EmailService(mailbox)
        self.assistant = AssistantService(api)
        self.dashboard = DashboardService(api, use_mock_data=use_mock_data)
        self._resources: dict[str, ResourceService] = {}

    def resource(self, entity_name: str) -> ResourceService:
        service = self._resources.get(entity_name)
        if service is not None:
            return service
        entity = self.catalog.entity(entity_name)
        service_cls = SERVICE_CLASSES.get(entity_name)
        if service_cls is None:
            raise CatalogError(f"{entity_name} has no REST service")
        service = service_cls(self.api, collection=entity.collection, scope=entity.scope)
        self._resources[entity_name] = service
        return service


__all__ = [
    "ApprovalService",
    "AssistantService",
    "BidService",
    "ContractService",
    "DashboardService",
    "DocumentService",
    "EmailService",
    "InvoiceService",
    "PaymentService",
    "QuoteService",
    "RFIService",
    "ResourceService",
    "SERVICE_CLASSES",
    "ServiceRegistry",
    "SubmittalService",
    "UnknownActionError",
    "as_list",
]
