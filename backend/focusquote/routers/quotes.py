import io
import logging
from datetime import date
from urllib.parse import quote as urlquote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from focusquote import documents, gateway, lifecycle, schemas
from focusquote.deps import get_current_user, get_state
from focusquote.link_utils import public_quote_url, whatsapp_share_url
from focusquote.session import AppState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


def pdf_response(fname: str, pdf_bytes: bytes) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{urlquote(fname)}"},
    )


async def _ensure_client_owned(client_id: str, user_id: str) -> schemas.Client:
    client = await gateway.get_client(user_id, client_id)
    if not client:
        raise HTTPException(status_code=400, detail="Client not found")
    return client


async def _get_owned_quote(quote_id: str, user_id: str) -> schemas.Quote:
    quote = await gateway.get_quote(user_id, quote_id)
    if not quote:
        raise HTTPException(status_code=404, detail="Quote not found")
    return quote


def _validate(payload: schemas.QuoteBase) -> None:
    # antes de qualquer chamada ao banco
    try:
        lifecycle.validate_for_save(payload.client_id, payload.items)
    except lifecycle.QuoteValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/defaults", response_model=schemas.QuoteDraftOut)
async def quote_defaults(user: schemas.User = Depends(get_current_user)):
    """Formulário inicial do construtor de orçamento."""
    profile = await gateway.fetch_profile(user.id)
    return lifecycle.new_quote_defaults(profile)


@router.post("/items/from-service/{service_id}", response_model=schemas.QuoteItem)
async def item_from_service(service_id: str, user: schemas.User = Depends(get_current_user)):
    template = await gateway.get_service(user.id, service_id)
    if not template:
        raise HTTPException(status_code=404, detail="Service not found")
    return lifecycle.item_from_template(template)


@router.post("/", response_model=schemas.Quote)
async def create_quote(
    payload: schemas.QuoteCreate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    _validate(payload)
    await _ensure_client_owned(payload.client_id, user.id)
    _, total = lifecycle.compute_totals(payload.items, payload.discount_cents, payload.extra_fees_cents)
    number = payload.number or lifecycle.generate_quote_number()
    quote = await gateway.save_quote(user.id, None, number, payload, total)
    state.item_saved("quotes", quote)
    logger.info("quote %s created for user %s", quote.number, user.id)
    return quote


@router.get("/", response_model=list[schemas.Quote])
async def list_quotes(
    status: schemas.QuoteStatus | None = None,
    q: str | None = Query(default=None, description="Number or client name contains"),
    user: schemas.User = Depends(get_current_user),
):
    quotes = await gateway.list_quotes(user.id, status=status)
    if q:
        ids = set(await gateway.search_quote_ids(user.id, q))
        quotes = [x for x in quotes if x.id in ids]
    return quotes


@router.get("/by-id/{quote_id}", response_model=schemas.Quote)
async def get_quote(quote_id: str, user: schemas.User = Depends(get_current_user)):
    return await _get_owned_quote(quote_id, user.id)


@router.put("/by-id/{quote_id}", response_model=schemas.Quote)
async def update_quote(
    quote_id: str,
    payload: schemas.QuoteUpdate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    _validate(payload)
    existing = await _get_owned_quote(quote_id, user.id)
    await _ensure_client_owned(payload.client_id, user.id)
    if payload.status is None:
        payload = payload.model_copy(update={"status": existing.status})
    _, total = lifecycle.compute_totals(payload.items, payload.discount_cents, payload.extra_fees_cents)
    quote = await gateway.save_quote(user.id, quote_id, existing.number, payload, total)
    state.item_saved("quotes", quote)
    return quote


@router.patch("/by-id/{quote_id}/status", response_model=schemas.Quote)
async def change_status(
    quote_id: str,
    payload: schemas.QuoteStatusUpdate,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    existing = await _get_owned_quote(quote_id, user.id)
    try:
        new_status = lifecycle.manual_transition(existing.status, payload.status)
    except lifecycle.QuoteValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await gateway.update_quote_status(quote_id, new_status, user_id=user.id)
    # só depois da confirmação do banco
    quote = existing.model_copy(update={"status": new_status})
    state.item_saved("quotes", quote)
    return quote


@router.delete("/by-id/{quote_id}", status_code=204)
async def delete_quote(
    quote_id: str,
    user: schemas.User = Depends(get_current_user),
    state: AppState = Depends(get_state),
):
    await _get_owned_quote(quote_id, user.id)
    await gateway.delete_quote(user.id, quote_id)
    state.item_deleted("quotes", quote_id)
    return None


@router.get("/by-id/{quote_id}/download.pdf")
async def download_quote_pdf(quote_id: str, user: schemas.User = Depends(get_current_user)):
    quote = await _get_owned_quote(quote_id, user.id)
    client = await gateway.get_client(user.id, quote.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    profile = await gateway.fetch_profile(user.id) or schemas.Profile(name=user.email, email=user.email)
    fname, pdf_bytes = documents.render_quote(quote, profile, client, generated_on=date.today())
    return pdf_response(fname, pdf_bytes)


@router.get("/by-id/{quote_id}/public_url")
async def public_url_by_id(quote_id: str, user: schemas.User = Depends(get_current_user)):
    """Retorna o link público (sem login) para o cliente visualizar e aprovar."""
    quote = await _get_owned_quote(quote_id, user.id)
    return {"url": public_quote_url(quote.id, user.id)}


@router.get("/by-id/{quote_id}/share", response_model=schemas.ShareOut)
async def share_quote(quote_id: str, user: schemas.User = Depends(get_current_user)):
    """Link público do orçamento + atalho do WhatsApp para o telefone do cliente."""
    quote = await _get_owned_quote(quote_id, user.id)
    client = await gateway.get_client(user.id, quote.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    url = public_quote_url(quote.id, user.id)
    try:
        wa = whatsapp_share_url(quote, client, url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"url": url, "whatsapp_url": wa}
