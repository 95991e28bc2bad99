from datetime import date

import pytest

from focusquote import documents
from focusquote.formatting import format_brl, format_date
from focusquote.schemas import Client, PaymentMethod, Profile, Quote, QuoteItem, QuoteStatus, ServiceType

PROFILE = Profile(name="Ana Lima", studio_name="Estúdio Luz", tax_id="12.345.678/0001-90",
                  address="Av. Paulista, 1000", phone="(11) 3333-4444")
CLIENT = Client(id="c1", name="João  da Silva", email="joao@example.com", address="Rua A, 1", tax_id="")


def _quote(**overrides):
    data = dict(
        id="q1", number="181020261030", client_id="c1",
        date=date(2026, 10, 18), valid_until=date(2026, 11, 2),
        status=QuoteStatus.SENT,
        items=[
            QuoteItem(name="Ensaio <externo>", unit_price_cents=10000, quantity=2, type=ServiceType.HOURLY),
            QuoteItem(name="Álbum", unit_price_cents=5000, quantity=1, type=ServiceType.PACKAGE),
        ],
        discount_cents=2000, extra_fees_cents=1000,
        payment_method=PaymentMethod.CARD, payment_conditions="3x sem juros",
        total_cents=24000,
    )
    data.update(overrides)
    return Quote(**data)


def test_format_brl():
    assert format_brl(0) == "R$ 0,00"
    assert format_brl(24000) == "R$ 240,00"
    assert format_brl(123456789) == "R$ 1.234.567,89"
    assert format_brl(-550) == "-R$ 5,50"


def test_format_date():
    assert format_date(date(2026, 3, 7)) == "07/03/2026"
    assert format_date(None) == ""


def test_filename_normalizes_whitespace():
    assert documents.quote_filename(_quote(), CLIENT) == "Orcamento_181020261030_João_da_Silva.pdf"


def test_html_blocks():
    html = documents.build_quote_html(_quote(), PROFILE, CLIENT)
    assert "Estúdio Luz" in html
    assert "ORÇAMENTO" in html and "#181020261030" in html
    assert "Emissão: 18/10/2026" in html
    assert "Vencimento: 02/11/2026" in html
    assert "CPF/CNPJ: ---" in html
    assert "Enviado" in html
    assert "2 Hora" in html
    assert "R$ 200,00" in html
    # subtotal = total + desconto
    assert "R$ 260,00" in html
    assert "- R$ 20,00" in html
    assert "R$ 240,00" in html
    assert "Método: Cartão de Crédito" in html
    assert "3x sem juros" in html
    assert "ASSINATURA" in html and "Ana Lima" in html
    assert "display: table-header-group" in html


def test_html_escapes_user_text():
    html = documents.build_quote_html(_quote(), PROFILE, CLIENT)
    assert "Ensaio &lt;externo&gt;" in html
    assert "<externo>" not in html


def test_html_without_discount_has_no_discount_line():
    html = documents.build_quote_html(_quote(discount_cents=0, total_cents=26000), PROFILE, CLIENT)
    assert "Desconto" not in html


def test_html_studio_falls_back_to_name():
    html = documents.build_quote_html(_quote(), Profile(name="Ana Lima"), CLIENT, generated_on=date(2026, 10, 18))
    assert "<p class=\"studio\">Ana Lima</p>" in html
    assert "Gerado em 18/10/2026" in html


def test_render_quote_uses_writer(monkeypatch):
    seen = {}

    def fake_write(html):
        seen["html"] = html
        return b"%PDF-1.7 fake"

    monkeypatch.setattr(documents, "_write_pdf", fake_write)
    fname, pdf = documents.render_quote(_quote(), PROFILE, CLIENT)
    assert fname.endswith(".pdf")
    assert pdf[:4] == b"%PDF"
    assert "Ensaio" in seen["html"]


def test_render_errors_propagate(monkeypatch):
    def boom(html):
        raise RuntimeError("layout failed")

    monkeypatch.setattr(documents, "_write_pdf", boom)
    with pytest.raises(RuntimeError):
        documents.render_quote(_quote(), PROFILE, CLIENT)
