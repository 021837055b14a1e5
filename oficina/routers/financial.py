"""
Financial ledger routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import case, func, select
from datetime import date
from typing import Dict, List, Optional

from oficina.constants import TRANSACTION_CATEGORIES
from oficina.database import get_db
from oficina.errors import BusinessRuleError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.financial import FinancialTransaction, TransactionType
from oficina.models.user import User
from oficina.schemas.financial import FinancialSummary, Transaction, TransactionCreate
from oficina.services.totals import D
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/financial", tags=["financial"])
logger = get_logger(__name__)


def _filtered(query, type_filter=None, start=None, end=None):
    if type_filter:
        query = query.where(FinancialTransaction.type == type_filter)
    if start:
        query = query.where(FinancialTransaction.date >= start)
    if end:
        query = query.where(FinancialTransaction.date <= end)
    return query


@router.get("/transactions", response_model=List[Transaction])
async def get_transactions(
    skip: int = 0,
    limit: int = 100,
    type: Optional[TransactionType] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get transactions, most recent first.
    """
    query = _filtered(select(FinancialTransaction), type, start, end).order_by(
        FinancialTransaction.date.desc(), FinancialTransaction.id.desc()
    )
    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/summary", response_model=FinancialSummary)
async def get_summary(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get income, expenses and balance for a period.
    """
    query = _filtered(
        select(
            func.coalesce(func.sum(case(
                (FinancialTransaction.type == TransactionType.INCOME, FinancialTransaction.amount),
                else_=0,
            )), 0),
            func.coalesce(func.sum(case(
                (FinancialTransaction.type == TransactionType.EXPENSE, FinancialTransaction.amount),
                else_=0,
            )), 0),
        ),
        start=start,
        end=end,
    )
    income, expenses = (await db.execute(query)).one()
    income, expenses = D(income), D(expenses)
    return FinancialSummary(income=income, expenses=expenses, balance=income - expenses)


@router.get("/categories", response_model=Dict[TransactionType, List[str]])
async def get_categories(current_user: User = Depends(get_current_active_user)):
    """
    Get the valid categories for each transaction type.
    """
    return TRANSACTION_CATEGORIES


@router.post("/transactions", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Record an income or expense.
    """
    db_transaction = FinancialTransaction(**transaction.model_dump())
    db.add(db_transaction)
    await db.commit()
    await db.refresh(db_transaction)

    logger.info(
        f"{db_transaction.type.value.capitalize()} of {db_transaction.amount} recorded "
        f"({db_transaction.category})"
    )
    return db_transaction


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a manual transaction. Service order revenue cannot be deleted.
    """
    db_transaction = await db.get(FinancialTransaction, transaction_id)
    if not db_transaction:
        raise NotFoundError("Transaction")
    if db_transaction.service_order_id is not None:
        raise BusinessRuleError("Transactions generated by service orders cannot be deleted")

    await db.delete(db_transaction)
    await db.commit()

    return None
