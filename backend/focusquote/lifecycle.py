"""
Ciclo de vida do orçamento.

Rascunho -> Enviado -> Visualizado -> Aprovado | Recusado.

Há duas origens de transição:
  * manual (dropdown de status): qualquer estado para qualquer outro,
    regra explícita ``MANUAL_OVERRIDE_ALLOWED``;
  * link público sem autenticação: abrir marca como visualizado quando o
    orçamento ainda está em rascunho/enviado, aprovar sempre leva a aprovado.

Nenhuma transição recalcula o total; o total só muda no save.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Tuple

from focusquote import config
from focusquote.schemas import (
    PaymentMethod,
    Profile,
    QuoteDraftOut,
    QuoteItem,
    QuoteStatus,
    ServiceTemplate,
)

logger = logging.getLogger(__name__)

MANUAL_OVERRIDE_ALLOWED = True

# estados que o link público ainda pode promover a "visualizado"
VIEWABLE_FROM = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT})


class QuoteValidationError(ValueError):
    pass


def compute_totals(items: Iterable[QuoteItem], discount_cents: int = 0, extra_fees_cents: int = 0) -> Tuple[int, int]:
    """Retorna (subtotal, total) em centavos; o total nunca fica negativo."""
    subtotal = sum(int(i.unit_price_cents) * int(i.quantity) for i in items)
    total = max(0, subtotal - int(discount_cents or 0) + int(extra_fees_cents or 0))
    return subtotal, total


def generate_quote_number(now: Optional[datetime] = None) -> str:
    # DDMMYYYYHHmm no horário local
    now = now or datetime.now()
    return now.strftime("%d%m%Y%H%M")


def new_quote_defaults(profile: Optional[Profile], today: Optional[date] = None,
                       now: Optional[datetime] = None) -> QuoteDraftOut:
    today = today or date.today()
    terms = (profile.default_terms if profile else "") or config.DEFAULT_PAYMENT_CONDITIONS
    return QuoteDraftOut(
        number=generate_quote_number(now),
        client_id=None,
        date=today,
        valid_until=today + timedelta(days=config.QUOTE_VALIDITY_DAYS),
        status=QuoteStatus.DRAFT,
        items=[],
        discount_cents=0,
        extra_fees_cents=0,
        payment_method=PaymentMethod.PIX,
        payment_conditions=terms,
    )


def item_from_template(template: ServiceTemplate) -> QuoteItem:
    return QuoteItem(
        name=template.name,
        description=template.description,
        unit_price_cents=template.default_price_cents,
        quantity=1,
        type=template.type,
    )


def validate_for_save(client_id: Optional[str], items: list) -> None:
    if not client_id:
        raise QuoteValidationError("Selecione um cliente!")
    if not items:
        raise QuoteValidationError("Adicione pelo menos um serviço!")


def manual_transition(current: QuoteStatus, target: QuoteStatus) -> QuoteStatus:
    if not MANUAL_OVERRIDE_ALLOWED and current != target:
        raise QuoteValidationError(f"Transição não permitida: {current.value} -> {target.value}")
    logger.info("manual status change %s -> %s", current.value, target.value)
    return target


def on_public_view(current: QuoteStatus) -> Optional[QuoteStatus]:
    """Novo status ao abrir o link público, ou None se nada muda."""
    if current in VIEWABLE_FROM:
        return QuoteStatus.VIEWED
    return None


def on_public_approve(current: QuoteStatus) -> QuoteStatus:
    return QuoteStatus.APPROVED
