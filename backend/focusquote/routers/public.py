"""
Página pública do orçamento (sem autenticação).

Contrato do link: ``/public?view=public&q=<quoteId>&u=<userId>``. Leitura de um
orçamento + perfil do dono + cliente; escrita limitada a marcar como
visualizado na abertura e a aprovar.
"""
import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Query

from focusquote import documents, gateway, lifecycle, schemas
from focusquote.routers.quotes import pdf_response

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/public", tags=["quotes-public"])

UNAVAILABLE = "Orçamento indisponível"


async def _load(quote_id: str, user_id: str):
    quote = await gateway.get_quote(user_id, quote_id)
    if not quote:
        raise HTTPException(status_code=404, detail=UNAVAILABLE)
    profile = await gateway.fetch_profile(user_id)
    client = await gateway.get_client(user_id, quote.client_id)
    if profile is None or client is None:
        raise HTTPException(status_code=404, detail=UNAVAILABLE)
    return quote, profile, client


@public_router.get("", response_model=schemas.PublicQuoteOut)
async def view_public_quote(
    q: str = Query(..., description="Quote id"),
    u: str = Query(..., description="Owner user id"),
    view: str = Query("public"),
):
    if view != "public":
        raise HTTPException(status_code=404, detail=UNAVAILABLE)
    quote, profile, client = await _load(q, u)
    new_status = lifecycle.on_public_view(quote.status)
    if new_status is not None:
        await gateway.update_quote_status(quote.id, new_status, user_id=u)
        logger.info("quote %s viewed via public link (%s -> %s)", quote.number, quote.status.value, new_status.value)
        quote = quote.model_copy(update={"status": new_status})
    return {"quote": quote, "profile": profile, "client": client}


@public_router.post("/approve", response_model=schemas.Quote)
async def approve_public_quote(q: str = Query(...), u: str = Query(...)):
    quote = await gateway.get_quote(u, q)
    if not quote:
        raise HTTPException(status_code=404, detail=UNAVAILABLE)
    new_status = lifecycle.on_public_approve(quote.status)
    await gateway.update_quote_status(quote.id, new_status, user_id=u)
    logger.info("quote %s approved via public link", quote.number)
    return quote.model_copy(update={"status": new_status})


@public_router.get("/download.pdf")
async def public_download_quote_pdf(q: str = Query(...), u: str = Query(...)):
    quote, profile, client = await _load(q, u)
    fname, pdf_bytes = documents.render_quote(quote, profile, client, generated_on=date.today())
    return pdf_response(fname, pdf_bytes)
