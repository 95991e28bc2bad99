from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from focusquote import config
from focusquote.schemas import DashboardOut, Profile, Quote, QuoteReportOut, QuoteStatus

PENDING_STATUSES = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.VIEWED})


def quote_report(quotes: Iterable[Quote], start: date, end: date,
                 status: Optional[QuoteStatus] = None) -> QuoteReportOut:
    filtered = [
        q for q in quotes
        if start <= q.date <= end and (status is None or q.status == status)
    ]
    approved = [q for q in filtered if q.status == QuoteStatus.APPROVED]
    pending = [q for q in filtered if q.status not in (QuoteStatus.APPROVED, QuoteStatus.DECLINED)]
    return QuoteReportOut(
        start=start,
        end=end,
        status=status,
        count=len(filtered),
        revenue_cents=sum(q.total_cents for q in approved),
        approved_count=len(approved),
        pending_count=len(pending),
        quotes=filtered,
    )


def dashboard(quotes: List[Quote], profile: Optional[Profile], today: Optional[date] = None) -> DashboardOut:
    today = today or date.today()
    approved = [q for q in quotes if q.status == QuoteStatus.APPROVED]
    month_revenue = sum(
        q.total_cents for q in approved
        if q.date.year == today.year and q.date.month == today.month
    )
    goal = (profile.monthly_goal_cents if profile else 0) or config.DEFAULT_MONTHLY_GOAL_CENTS
    progress = min(round(month_revenue * 100 / goal), 100)
    # a lista chega do sync já ordenada da mais nova para a mais antiga
    return DashboardOut(
        total=len(quotes),
        approved=len(approved),
        pending=len([q for q in quotes if q.status in PENDING_STATUSES]),
        revenue_cents=sum(q.total_cents for q in approved),
        month_revenue_cents=month_revenue,
        monthly_goal_cents=goal,
        goal_progress_percent=progress,
        recent_quotes=quotes[:5],
    )
