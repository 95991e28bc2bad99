"""
Fluxo de caixa: lançamentos persistidos + orçamentos aprovados como entradas.

As entradas vindas de orçamentos são sintéticas: geradas na leitura, nunca
gravadas em ``transactions`` e identificadas pelo prefixo ``quote-``.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from focusquote.schemas import (
    CashFlowStats,
    FinancialRow,
    Quote,
    QuoteStatus,
    Transaction,
    TransactionType,
)

SYNTHETIC_PREFIX = "quote-"
QUOTE_CATEGORY = "Orçamento"


def is_synthetic(row_id: str) -> bool:
    return str(row_id).startswith(SYNTHETIC_PREFIX)


def default_period(today: Optional[date] = None) -> Tuple[date, date]:
    """Do primeiro dia do mês corrente até hoje."""
    today = today or date.today()
    return today.replace(day=1), today


def quote_income_rows(quotes: Iterable[Quote]) -> List[FinancialRow]:
    return [
        FinancialRow(
            id=f"{SYNTHETIC_PREFIX}{q.id}",
            description=f"Orçamento #{q.number}",
            amount_cents=q.total_cents,
            type=TransactionType.INCOME,
            category=QUOTE_CATEGORY,
            date=q.date,
            synthetic=True,
        )
        for q in quotes
        if q.status == QuoteStatus.APPROVED
    ]


def merge_financial_rows(
    quotes: Iterable[Quote],
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> List[FinancialRow]:
    rows = quote_income_rows(quotes)
    rows += [FinancialRow(**t.model_dump(), synthetic=False) for t in transactions]
    rows = [r for r in rows if start <= r.date <= end]
    # sort estável: empates mantêm orçamentos antes dos lançamentos
    rows.sort(key=lambda r: r.date, reverse=True)
    return rows


def summarize(rows: Iterable[FinancialRow]) -> CashFlowStats:
    income = 0
    expense = 0
    for r in rows:
        if r.type == TransactionType.INCOME:
            income += r.amount_cents
        elif r.type == TransactionType.EXPENSE:
            expense += r.amount_cents
    return CashFlowStats(income_cents=income, expense_cents=expense, balance_cents=income - expense)
