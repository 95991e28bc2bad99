import re
from urllib.parse import quote as urlquote, urlencode

from focusquote.config import PUBLIC_BASE_URL
from focusquote.formatting import format_brl
from focusquote.schemas import Client, Quote


def public_quote_url(quote_id: str, user_id: str, base: str = PUBLIC_BASE_URL) -> str:
    """Link sem autenticação: ?view=public&q=<quoteId>&u=<userId>."""
    params = urlencode({"view": "public", "q": quote_id, "u": user_id})
    return f"{base.rstrip('/')}/public?{params}"


def whatsapp_share_url(quote: Quote, client: Client, public_url: str) -> str:
    phone = re.sub(r"\D", "", client.phone or "")
    if not phone:
        raise ValueError("Cliente sem telefone cadastrado.")
    message = (
        f"Olá {client.name}! 📸\n\n"
        f"Segue meu orçamento #{quote.number} no valor de {format_brl(quote.total_cents)}.\n\n"
        f"Visualizar e aprovar:\n{public_url}"
    )
    return f"https://wa.me/{phone}?text={urlquote(message)}"
