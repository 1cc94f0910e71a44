"""
Fund ledger engine.

The ledger is append-only.  ``balanceAfter`` of a new row is the previous
row's ``balanceAfter`` plus the signed amount, computed by the gateway at
append time.  Rows are never rebalanced afterwards, so a backdated entry
does not change the balances of rows appended before it: the running
balance follows *append* order, not ``date`` order.

Read-side figures:

* income / expense totals are summed over rows whose ``date`` falls in an
  inclusive range;
* the current balance is always ``balanceAfter`` of the last appended row,
  whatever range is being looked at.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from pharmahr.core.clock import local_now
from pharmahr.core.enums import TransactionType
from pharmahr.core.exceptions import GatewayError
from pharmahr.schemas.fund import FundTransactionIn, FundTransactionRead
from pharmahr.services.gateway_client import GatewayClient
from pharmahr.services.session import OperatorSession

logger = logging.getLogger(__name__)


def signed_amount(tx_type: TransactionType | str, amount: int) -> int:
    return amount if TransactionType(tx_type) is TransactionType.INCOME else -amount


def next_balance(last_balance: int, tx_type: TransactionType | str, amount: int) -> int:
    """Balance after appending one transaction to a ledger ending at ``last_balance``."""
    return last_balance + signed_amount(tx_type, amount)


@dataclass(frozen=True)
class LedgerSummary:
    income: int
    expense: int
    balance: int

    @property
    def net(self) -> int:
        return self.income - self.expense


def summarize(
    transactions: Sequence[FundTransactionRead],
    date_from: str | date,
    date_to: str | date,
) -> LedgerSummary:
    """Range totals plus the global current balance.

    ``transactions`` must be in append order (as ``getFunds`` returns them).
    """
    start = str(date_from)
    end = str(date_to)
    in_range = [t for t in transactions if start <= t.date <= end]
    income = sum(t.amount for t in in_range if t.type is TransactionType.INCOME)
    expense = sum(t.amount for t in in_range if t.type is TransactionType.EXPENSE)
    balance = transactions[-1].balance_after if transactions else 0
    return LedgerSummary(income=income, expense=expense, balance=balance)


def content_suggestions(transactions: Iterable[FundTransactionRead]) -> list[str]:
    """Distinct past contents, first-seen order, for the entry form."""
    seen: dict[str, None] = {}
    for t in transactions:
        seen.setdefault(t.content, None)
    return list(seen)


class FundLedger:
    """Client-side view of the ledger bound to one operator session."""

    def __init__(self, gateway: GatewayClient, session: OperatorSession) -> None:
        self._gateway = gateway
        self._session = session
        self.transactions: list[FundTransactionRead] = []

    async def load(self) -> list[FundTransactionRead]:
        rows = await self._gateway.call("getFunds")
        self.transactions = [FundTransactionRead.model_validate(r) for r in rows or []]
        return self.transactions

    async def append(
        self,
        tx_type: TransactionType | str,
        amount: int | str,
        content: str,
        *,
        on: str | date | None = None,
        performer: str | None = None,
    ) -> int:
        """Append one transaction and return the balance the gateway stored.

        The ledger is reloaded afterwards so ``transactions`` mirrors the
        persisted order.  Once ``addFund`` has succeeded the row exists, so a
        failed reload is only logged and the row is appended locally instead.
        """
        tx = FundTransactionIn(
            date=str(on or local_now().date()),
            type=TransactionType(tx_type),
            amount=amount,
            content=content,
            performer=performer or self._session.name,
        )
        result = await self._gateway.call("addFund", **tx.to_wire()) or {}
        try:
            await self.load()
        except GatewayError as e:
            logger.warning("Ledger reload after addFund failed: %s", e)
            if "balanceAfter" in result:
                self.transactions.append(
                    FundTransactionRead(
                        **tx.model_dump(exclude={"id"}),
                        id=result.get("id") or "",
                        balance_after=result["balanceAfter"],
                    )
                )
        balance = result.get("balanceAfter", self.balance)
        logger.info(
            "%s %s %d VND (%s) -> balance %s",
            self._session.username, tx.type.value, tx.amount, tx.content, balance,
        )
        return balance

    @property
    def balance(self) -> int:
        return self.transactions[-1].balance_after if self.transactions else 0

    def summary(self, date_from: str | date, date_to: str | date) -> LedgerSummary:
        return summarize(self.transactions, date_from, date_to)

    def suggestions(self) -> list[str]:
        return content_suggestions(self.transactions)
