from datetime import date

from fastapi import APIRouter, Depends

from focusquote import finance, gateway, reporting, schemas
from focusquote.deps import get_current_user

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("/quotes", response_model=schemas.QuoteReportOut)
async def reports_quotes(
    start: date | None = None,
    end: date | None = None,
    status: schemas.QuoteStatus | None = None,
    user: schemas.User = Depends(get_current_user),
):
    default_start, default_end = finance.default_period()
    quotes = await gateway.list_quotes(user.id)
    return reporting.quote_report(quotes, start or default_start, end or default_end, status=status)

@router.get("/dashboard", response_model=schemas.DashboardOut)
async def reports_dashboard(user: schemas.User = Depends(get_current_user)):
    quotes = await gateway.list_quotes(user.id)
    profile = await gateway.fetch_profile(user.id)
    return reporting.dashboard(quotes, profile)
