import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response

from focusquote import finance, gateway, schemas
from focusquote.deps import get_current_user
from focusquote.models import new_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/finance", tags=["finance"])

@router.get("/cashflow", response_model=schemas.CashFlowOut)
async def cashflow(
    start: date | None = None,
    end: date | None = None,
    user: schemas.User = Depends(get_current_user),
):
    default_start, default_end = finance.default_period()
    start = start or default_start
    end = end or default_end
    quotes = await gateway.list_quotes(user.id)
    transactions = await gateway.list_transactions(user.id)
    rows = finance.merge_financial_rows(quotes, transactions, start, end)
    return {"start": start, "end": end, "rows": rows, "stats": finance.summarize(rows)}

@router.get("/transactions", response_model=list[schemas.Transaction])
async def list_transactions(user: schemas.User = Depends(get_current_user)):
    return await gateway.list_transactions(user.id)

@router.post("/transactions", response_model=schemas.Transaction)
async def add_transaction(payload: schemas.TransactionCreate, user: schemas.User = Depends(get_current_user)):
    tx = schemas.Transaction(
        id=new_id(),
        description=payload.description,
        amount_cents=payload.amount_cents,
        type=payload.type,
        category=payload.category or "Geral",
        date=payload.date or date.today(),
    )
    return await gateway.insert_transaction(user.id, tx)

@router.delete("/transactions/{tx_id}", status_code=204)
async def delete_transaction(tx_id: str, user: schemas.User = Depends(get_current_user)):
    # entradas de orçamento são só leitura
    if finance.is_synthetic(tx_id):
        logger.info("ignoring delete of synthetic row %s", tx_id)
        return Response(status_code=204)
    deleted = await gateway.delete_transaction(user.id, tx_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return Response(status_code=204)
