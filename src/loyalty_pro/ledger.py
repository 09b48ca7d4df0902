"""Ledger service: admin accounts, customers, and transaction accumulation.

Every operation reads the full admin table from the store, works on it in
memory, and writes the full table back only when something changed.
"""

import asyncio

import structlog

from loyalty_pro.exceptions import (
    AdminNotFoundError,
    AlreadyExistsError,
    InvalidCredentialsError,
)
from loyalty_pro.models import (
    Admin,
    AdminTable,
    AdminView,
    Customer,
    CustomerDraft,
    Transaction,
    TransactionReceipt,
    utcnow,
)
from loyalty_pro.passwords import hash_password, verify_password
from loyalty_pro.store import DocumentStore

logger = structlog.get_logger(__name__)


class LedgerService:
    """Owns admin and customer records on top of a ``DocumentStore``.

    Mutations are serialized through one lock per service instance. The
    document holds every admin, so the lock covers the whole
    read-modify-write cycle. Writers in other processes are not coordinated
    and the last save wins.
    """

    def __init__(self, store: DocumentStore):
        self._store = store
        self._write_lock = asyncio.Lock()
        self._logger = logger.bind(service="ledger")

    # === Accounts ===

    async def register(self, name: str, username: str, password: str) -> AdminView:
        """Create an admin with no customers.

        Raises:
            AlreadyExistsError: If ``username`` is taken.
        """
        async with self._write_lock:
            table = await self._store.load()
            if username in table:
                self._logger.info("register_rejected", username=username)
                raise AlreadyExistsError()

            password_hash = await asyncio.to_thread(hash_password, password)
            admin = Admin(username=username, password_hash=password_hash, name=name)
            table[username] = admin
            await self._store.save(table)

        self._logger.info("admin_registered", username=username)
        return admin.view()

    async def login(self, username: str, password: str) -> AdminView:
        """Check credentials.

        Raises:
            InvalidCredentialsError: Unknown user or wrong password, same message.
        """
        table = await self._store.load()
        admin = table.get(username)
        if admin is not None and await asyncio.to_thread(
            verify_password, password, admin.password_hash
        ):
            self._logger.info("admin_logged_in", username=username)
            return admin.view()

        self._logger.info("login_failed", username=username)
        raise InvalidCredentialsError()

    # === Customers ===

    async def get_customers(self, username: str) -> list[Customer]:
        """Customers of ``username`` in first-transaction order.

        Raises:
            AdminNotFoundError: If ``username`` does not exist.
        """
        table = await self._store.load()
        return self._require_admin(table, username).customers

    async def apply_transaction(
        self,
        username: str,
        draft: CustomerDraft,
        transaction: Transaction,
    ) -> TransactionReceipt:
        """Add ``transaction`` to the customer identified by ``draft.mobile``.

        An existing customer keeps its name and pin; only the totals and history
        change. An unknown mobile creates a customer from ``draft`` at the end of
        the list. Replaying a transaction applies it again.

        Raises:
            AdminNotFoundError: If ``username`` does not exist. Nothing is written.
        """
        async with self._write_lock:
            table = await self._store.load()
            admin = self._require_admin(table, username)
            when = utcnow()

            index = admin.find_customer(draft.mobile)
            if index is not None:
                customer = admin.customers[index].absorb(transaction, when)
                admin.customers[index] = customer
            else:
                customer = Customer.from_draft(draft, transaction, when)
                admin.customers.append(customer)

            await self._store.save(table)

        self._logger.info(
            "transaction_applied",
            username=username,
            customer_created=index is None,
            bill=transaction.bill,
            points=transaction.points,
        )
        return TransactionReceipt(customer=customer, created=index is None)

    def _require_admin(self, table: AdminTable, username: str) -> Admin:
        admin = table.get(username)
        if admin is None:
            self._logger.info("admin_not_found", username=username)
            raise AdminNotFoundError()
        return admin
