"""Formatação pt-BR usada pelas telas e pelo PDF (moeda em Real, datas DD/MM/YYYY)."""
from datetime import date
from typing import Optional


def format_brl(cents: int) -> str:
    """12345678 -> 'R$ 123.456,78'."""
    cents = int(cents or 0)
    sign = "-" if cents < 0 else ""
    reais, centavos = divmod(abs(cents), 100)
    inteiro = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {inteiro},{centavos:02d}"


def format_date(d: Optional[date]) -> str:
    if d is None:
        return ""
    return d.strftime("%d/%m/%Y")
