"""Loyalty Pro - customer ledger and insight layer for small shops."""

__version__ = "0.1.0"

from loyalty_pro.clients import GeminiClient
from loyalty_pro.config import configure_logging, get_settings
from loyalty_pro.exceptions import (
    AdminNotFoundError,
    AlreadyExistsError,
    InvalidCredentialsError,
    LedgerError,
    ServiceUnavailableError,
    UpstreamError,
)
from loyalty_pro.insights import InsightRequestBuilder, InsightService
from loyalty_pro.ledger import LedgerService
from loyalty_pro.models import (
    Admin,
    AdminView,
    Customer,
    CustomerDraft,
    HistoryEntry,
    Transaction,
    TransactionReceipt,
)
from loyalty_pro.store import DocumentStore, JSONFileStore, MemoryStore

__all__ = [
    # Version
    "__version__",
    # Services
    "LedgerService",
    "InsightRequestBuilder",
    "InsightService",
    # Storage
    "DocumentStore",
    "JSONFileStore",
    "MemoryStore",
    # Models
    "Admin",
    "AdminView",
    "Customer",
    "CustomerDraft",
    "HistoryEntry",
    "Transaction",
    "TransactionReceipt",
    # Errors
    "LedgerError",
    "AlreadyExistsError",
    "InvalidCredentialsError",
    "AdminNotFoundError",
    "ServiceUnavailableError",
    "UpstreamError",
    # LLM Clients
    "GeminiClient",
    # Config
    "get_settings",
    "configure_logging",
]
