from __future__ import annotations

import logging
import re
from datetime import date
from html import escape
from typing import Optional, Tuple

from focusquote.formatting import format_brl, format_date
from focusquote.schemas import Client, Profile, Quote

logger = logging.getLogger(__name__)

_CSS = """
@page { size: A4; margin: 20mm; }
body { font-family: Helvetica, Arial, sans-serif; font-size: 9pt; color: #1e293b; }
.muted { color: #475569; }
.header { display: flex; justify-content: space-between; border-bottom: 1px solid #e2e8f0; padding-bottom: 10mm; }
.studio { font-size: 22pt; font-weight: bold; color: #4f46e5; margin: 0 0 2mm 0; }
.title { text-align: right; }
.title h2 { font-size: 18pt; margin: 0; }
.title .number { font-size: 11pt; font-weight: bold; }
.label { font-size: 8pt; font-weight: bold; color: #4f46e5; text-transform: uppercase; }
.client { display: flex; justify-content: space-between; margin-top: 10mm; }
.client .name { font-size: 13pt; font-weight: bold; margin: 2mm 0; }
.badge { display: inline-block; border: 1px solid #e2e8f0; background: #f8fafc; color: #4f46e5;
         border-radius: 3mm; padding: 1mm 4mm; font-size: 8pt; font-weight: bold; text-transform: uppercase; }
table.items { width: 100%; border-collapse: collapse; margin-top: 10mm; }
table.items thead { display: table-header-group; }
table.items tr { page-break-inside: avoid; }
table.items th { background: #f8fafc; color: #475569; font-size: 8pt; text-align: left; padding: 4mm; }
table.items td { padding: 4mm; vertical-align: middle; border-bottom: 1px solid #f1f5f9; }
table.items td.name { font-weight: bold; width: 90mm; }
table.items .center { text-align: center; }
table.items .right { text-align: right; }
.totals { page-break-inside: avoid; margin: 8mm 0 0 auto; width: 70mm; }
.totals div { display: flex; justify-content: space-between; padding: 1mm 0; }
.totals .discount { color: #059669; font-weight: bold; }
.totals .final { font-size: 16pt; font-weight: bold; color: #4f46e5; border-top: 1px solid #4f46e5; margin-top: 3mm; padding-top: 3mm; }
.payment { page-break-inside: avoid; margin-top: 12mm; }
.payment .box { background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 2mm; padding: 4mm; margin-top: 1mm; }
.signature { page-break-inside: avoid; margin-top: 25mm; width: 60mm; border-top: 1px solid #e2e8f0; padding-top: 2mm; }
.signature .name { font-size: 10pt; font-weight: bold; }
.signature .caption { font-size: 7pt; font-weight: bold; color: #475569; }
.generated { margin-top: 6mm; font-size: 7pt; color: #94a3b8; }
"""


_WS = re.compile(r"\s+")


def quote_filename(quote: Quote, client: Client) -> str:
    return f"Orcamento_{quote.number}_{_WS.sub('_', client.name)}.pdf"


def _item_rows(quote: Quote) -> str:
    rows = []
    for item in quote.items:
        rows.append(
            "<tr>"
            f"<td class='name'>{escape(item.name)}</td>"
            f"<td class='center'>{item.quantity} {escape(item.type.label)}</td>"
            f"<td class='right'>{format_brl(item.unit_price_cents)}</td>"
            f"<td class='right'><strong>{format_brl(item.unit_price_cents * item.quantity)}</strong></td>"
            "</tr>"
        )
    return "".join(rows)


def build_quote_html(quote: Quote, profile: Profile, client: Client,
                     generated_on: Optional[date] = None) -> str:
    studio = profile.studio_name or profile.name
    subtotal = quote.total_cents + (quote.discount_cents or 0)
    discount_html = ""
    if quote.discount_cents > 0:
        discount_html = (
            f"<div class='discount'><span>Desconto</span>"
            f"<span>- {format_brl(quote.discount_cents)}</span></div>"
        )
    generated_html = ""
    if generated_on is not None:
        generated_html = f"<div class='generated'>Gerado em {format_date(generated_on)}</div>"

    html = f"""
<!doctype html>
<html>
<head>
<meta charset="utf-8"/>
<title>Orçamento {escape(quote.number)}</title>
<style>{_CSS}</style>
</head>
<body>
  <div class="header">
    <div>
      <p class="studio">{escape(studio)}</p>
      <div class="muted">{escape(profile.name)}</div>
      <div class="muted">CNPJ/CPF: {escape(profile.tax_id)}</div>
      <div class="muted">{escape(profile.address)}</div>
      <div class="muted">{escape(profile.phone)}</div>
    </div>
    <div class="title">
      <h2>ORÇAMENTO</h2>
      <div class="number">#{escape(quote.number)}</div>
      <div class="muted">Emissão: {format_date(quote.date)}</div>
      <div class="muted">Vencimento: {format_date(quote.valid_until)}</div>
    </div>
  </div>

  <div class="client">
    <div>
      <div class="label">Cliente</div>
      <div class="name">{escape(client.name)}</div>
      <div class="muted">CPF/CNPJ: {escape(client.tax_id or '---')}</div>
      <div class="muted">E-mail: {escape(client.email)}</div>
      <div class="muted">{escape(client.address)}</div>
    </div>
    <div>
      <div class="label">Status</div>
      <span class="badge">{escape(quote.status.label)}</span>
    </div>
  </div>

  <table class="items">
    <thead>
      <tr><th>Serviço</th><th class="center">Qtd</th><th class="right">Unitário</th><th class="right">Total</th></tr>
    </thead>
    <tbody>
      {_item_rows(quote)}
    </tbody>
  </table>

  <div class="totals">
    <div class="muted"><span>Subtotal</span><span>{format_brl(subtotal)}</span></div>
    {discount_html}
    <div class="final"><span>Total Final</span><span>{format_brl(quote.total_cents)}</span></div>
  </div>

  <div class="payment">
    <div class="label">Pagamento</div>
    <div class="box">
      <div><strong>Método: {escape(quote.payment_method.label)}</strong></div>
      <div class="muted">{escape(quote.payment_conditions)}</div>
    </div>
  </div>

  <div class="signature">
    <div class="name">{escape(profile.name)}</div>
    <div class="caption">ASSINATURA</div>
  </div>
  {generated_html}
</body>
</html>
""".strip()
    return html


def _write_pdf(html: str) -> bytes:
    from weasyprint import HTML
    return HTML(string=html, base_url=".").write_pdf()


def render_quote(quote: Quote, profile: Profile, client: Client,
                 generated_on: Optional[date] = None) -> Tuple[str, bytes]:
    html = build_quote_html(quote, profile, client, generated_on=generated_on)
    pdf_bytes = _write_pdf(html)
    fname = quote_filename(quote, client)
    logger.info("rendered quote %s (%d bytes)", quote.number, len(pdf_bytes))
    return fname, pdf_bytes
