from datetime import date, datetime

import pytest

from focusquote import lifecycle
from focusquote.schemas import Profile, QuoteItem, QuoteStatus, ServiceTemplate, ServiceType


def _items(*pairs):
    return [QuoteItem(name=f"item {i}", unit_price_cents=p, quantity=q) for i, (p, q) in enumerate(pairs)]


def test_totals_scenario():
    subtotal, total = lifecycle.compute_totals(_items((10000, 2), (5000, 1)), 2000, 1000)
    assert subtotal == 25000
    assert total == 24000


def test_totals_empty_items():
    assert lifecycle.compute_totals([], 0, 1500) == (0, 1500)
    assert lifecycle.compute_totals([], 3000, 1000) == (0, 0)


def test_totals_floor_at_zero():
    _, total = lifecycle.compute_totals(_items((1000, 1)), 5000, 0)
    assert total == 0


def test_quote_number_format():
    assert lifecycle.generate_quote_number(datetime(2026, 3, 7, 9, 5)) == "070320260905"


def test_new_quote_defaults_use_profile_terms():
    draft = lifecycle.new_quote_defaults(Profile(default_terms="À vista"), today=date(2026, 10, 1),
                                         now=datetime(2026, 10, 1, 14, 30))
    assert draft.number == "011020261430"
    assert draft.valid_until == date(2026, 10, 16)
    assert draft.status == QuoteStatus.DRAFT
    assert draft.payment_conditions == "À vista"
    assert draft.items == []


def test_new_quote_defaults_fallback_terms():
    draft = lifecycle.new_quote_defaults(None, today=date(2026, 10, 1))
    assert draft.payment_conditions == "50% reserva + 50% entrega"


def test_item_from_template_copies_values():
    tpl = ServiceTemplate(id="s1", name="Casamento", description="Cobertura completa",
                          default_price_cents=350000, type=ServiceType.DAILY)
    item = lifecycle.item_from_template(tpl)
    assert (item.name, item.unit_price_cents, item.quantity, item.type) == ("Casamento", 350000, 1, ServiceType.DAILY)


@pytest.mark.parametrize("client_id,items,msg", [
    (None, _items((100, 1)), "Selecione um cliente!"),
    ("c1", [], "Adicione pelo menos um serviço!"),
])
def test_validate_for_save(client_id, items, msg):
    with pytest.raises(lifecycle.QuoteValidationError, match=msg):
        lifecycle.validate_for_save(client_id, items)


@pytest.mark.parametrize("current", [QuoteStatus.DRAFT, QuoteStatus.SENT])
def test_public_view_marks_viewed(current):
    assert lifecycle.on_public_view(current) == QuoteStatus.VIEWED


@pytest.mark.parametrize("current", [QuoteStatus.VIEWED, QuoteStatus.APPROVED, QuoteStatus.DECLINED])
def test_public_view_noop(current):
    assert lifecycle.on_public_view(current) is None


@pytest.mark.parametrize("current", list(QuoteStatus))
def test_public_approve_always_approved(current):
    assert lifecycle.on_public_approve(current) == QuoteStatus.APPROVED
    assert lifecycle.on_public_approve(lifecycle.on_public_approve(current)) == QuoteStatus.APPROVED


def test_manual_override_any_to_any():
    assert lifecycle.MANUAL_OVERRIDE_ALLOWED
    assert lifecycle.manual_transition(QuoteStatus.DECLINED, QuoteStatus.DRAFT) == QuoteStatus.DRAFT
    assert lifecycle.manual_transition(QuoteStatus.APPROVED, QuoteStatus.SENT) == QuoteStatus.SENT
