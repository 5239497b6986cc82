from typing import Annotated

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_transaction_service
from finance_tracker.api.schemas import TransactionPayload
from finance_tracker.models import Transaction
from finance_tracker.services.ledger import TransactionService

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=list[Transaction])
async def list_transactions(
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> list[Transaction]:
    return await service.get_all()


@router.post("", response_model=Transaction, status_code=201)
async def create_transaction(
    payload: TransactionPayload,
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Transaction:
    return await service.create(payload.model_dump())


@router.put("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    payload: TransactionPayload,
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Transaction:
    return await service.update(transaction_id, payload.model_dump())


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> dict[str, str]:
    await service.delete(transaction_id)
    return {"message": "Transaction deleted successfully"}
