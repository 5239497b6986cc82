from datetime import datetime, timezone
from typing import Any

from finance_tracker.domain import errors
from finance_tracker.domain.transactions import build_transaction_fields, transaction_from_document
from finance_tracker.integration.store import TRANSACTIONS, DocumentStore
from finance_tracker.logger import get_logger
from finance_tracker.models import Transaction

logger = get_logger(__name__)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TransactionService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get_all(self) -> list[Transaction]:
        documents = await self.store.find(TRANSACTIONS)
        transactions = [transaction_from_document(doc) for doc in documents]
        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions

    async def create(self, payload: dict[str, Any]) -> Transaction:
        fields = build_transaction_fields(payload)
        now = utcnow_iso()
        document = await self.store.insert(
            TRANSACTIONS,
            {**fields, "createdAt": now, "updatedAt": now},
        )
        logger.info(
            "[TX] Created %s %s %.2f (%s)",
            document["id"],
            fields["type"],
            fields["amount"],
            fields["category"],
        )
        return transaction_from_document(document)

    async def update(self, transaction_id: str, payload: dict[str, Any]) -> Transaction:
        fields = build_transaction_fields(payload)
        document = await self.store.update(
            TRANSACTIONS,
            transaction_id,
            {**fields, "updatedAt": utcnow_iso()},
        )
        if document is None:
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id))
        logger.info("[TX] Updated %s", transaction_id)
        return transaction_from_document(document)

    async def delete(self, transaction_id: str) -> None:
        if not await self.store.delete(TRANSACTIONS, transaction_id):
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id))
        logger.info("[TX] Deleted %s", transaction_id)
