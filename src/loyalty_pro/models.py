"""Data model for the admin table.

The persisted document is a JSON object mapping each username to its admin
record. Keys are camelCase on the wire (``totalSpent``, ``passwordHash``);
Python code uses the snake_case attribute names.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _Stored(_Record):
    """Unmodelled keys are kept so rewriting a document never drops them."""

    model_config = ConfigDict(extra="allow")


class Transaction(_Record):
    """A single purchase event. Absorbed into a customer's history, never stored alone."""

    bill: float
    points: int


class HistoryEntry(_Stored):
    """One processed transaction, timestamped when the ledger applied it."""

    date: datetime
    bill: float
    points: int


class CustomerDraft(_Stored):
    """Caller-supplied customer identity.

    ``name``, ``pin`` and any extra fields are only used when the mobile
    number is new to the admin.
    """

    mobile: str
    name: str = ""
    pin: str = ""


class Customer(_Stored):
    """A loyalty member, unique by ``mobile`` within one admin."""

    mobile: str
    name: str = ""
    pin: str = ""
    points: int = 0
    total_spent: float = Field(default=0.0, alias="totalSpent")
    history: list[HistoryEntry] = Field(default_factory=list)

    @classmethod
    def from_draft(
        cls, draft: CustomerDraft, transaction: Transaction, when: datetime
    ) -> "Customer":
        """Create a customer whose first history entry is ``transaction``.

        Extra draft fields are copied over, except ones naming ledger totals.
        """
        extras = {
            key: value
            for key, value in (draft.model_extra or {}).items()
            if key not in _CUSTOMER_KEYS
        }
        return cls(
            **extras,
            mobile=draft.mobile,
            name=draft.name,
            pin=draft.pin,
            points=transaction.points,
            total_spent=transaction.bill,
            history=[
                HistoryEntry(date=when, bill=transaction.bill, points=transaction.points)
            ],
        )

    def absorb(self, transaction: Transaction, when: datetime) -> "Customer":
        """Return a copy with ``transaction`` added to the totals and history.

        Identity fields are left untouched.
        """
        entry = HistoryEntry(date=when, bill=transaction.bill, points=transaction.points)
        return self.model_copy(
            update={
                "points": self.points + transaction.points,
                "total_spent": self.total_spent + transaction.bill,
                "history": [*self.history, entry],
            }
        )


_CUSTOMER_KEYS = set(Customer.model_fields) | {"totalSpent"}


class AdminView(_Record):
    """What callers see of an admin: never the password."""

    username: str
    name: str


class Admin(_Stored):
    """A registered business owner and their customer list."""

    username: str
    password_hash: str = Field(alias="passwordHash")
    name: str
    customers: list[Customer] = Field(default_factory=list)

    def view(self) -> AdminView:
        return AdminView(username=self.username, name=self.name)

    def find_customer(self, mobile: str) -> int | None:
        """Index of the customer with ``mobile``, or None."""
        for index, customer in enumerate(self.customers):
            if customer.mobile == mobile:
                return index
        return None


class TransactionReceipt(_Record):
    """Acknowledgement returned by ``LedgerService.apply_transaction``."""

    message: str = "Transaction processed!"
    customer: Customer
    created: bool


AdminTable = dict[str, Admin]

admin_table_adapter: TypeAdapter[AdminTable] = TypeAdapter(AdminTable)


def utcnow() -> datetime:
    """Wall-clock processing time used for history entries."""
    return datetime.now(UTC)
