"""
Acesso ao banco. Toda consulta é filtrada pelo ``user_id`` dono do registro e
toda linha devolvida passa pelos conversores ``to_*``, que normalizam campos
ausentes/NULL antes de chegar na lógica de domínio.
"""
from __future__ import annotations

import functools
import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from fastapi import HTTPException
from sqlalchemy import select, and_, or_

from focusquote import models
from focusquote.config import DEFAULT_MONTHLY_GOAL_CENTS
from focusquote.db import database
from focusquote.errors import StoreError
from focusquote.models import new_id
from focusquote.schemas import (
    AdminProfileOut,
    Client,
    ClientCreate,
    ClientType,
    PaymentMethod,
    Profile,
    Quote,
    QuoteBase,
    QuoteItem,
    QuoteStatus,
    ServiceCreate,
    ServiceTemplate,
    ServiceType,
    Transaction,
    TransactionType,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)


def _rec_to_dict(rec) -> dict:
    if rec is None:
        return {}
    try:
        return dict(rec._mapping)   # SQLAlchemy 2
    except AttributeError:
        return dict(rec)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _enum(cls: Type[Enum], value: Any, default: Enum) -> Any:
    try:
        return cls(value)
    except ValueError:
        return default


def store_call(fn):
    """Converte qualquer falha do driver em StoreError (HTTPException passa direto)."""
    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except (HTTPException, StoreError):
            raise
        except Exception as e:
            logger.exception("store operation %s failed", fn.__name__)
            raise StoreError(f"Erro de conexão com o banco: {e}") from e
    return wrapper


# ---- Conversores linha -> domínio ----
def to_user(row) -> User:
    d = _rec_to_dict(row)
    return User(
        id=d["id"],
        email=_text(d.get("email")),
        role=_enum(UserRole, d.get("role"), UserRole.PHOTOGRAPHER),
        is_blocked=bool(d.get("is_blocked") or False),
    )


def to_profile(row) -> Profile:
    d = _rec_to_dict(row)
    return Profile(
        name=_text(d.get("name")),
        studio_name=d.get("studio_name") or None,
        tax_id=_text(d.get("tax_id")),
        phone=_text(d.get("phone")),
        whatsapp=_text(d.get("whatsapp")),
        email=_text(d.get("email")),
        address=_text(d.get("address")),
        website=d.get("website") or None,
        instagram=d.get("instagram") or None,
        default_terms=_text(d.get("default_terms")),
        monthly_goal_cents=_int(d.get("monthly_goal_cents"), DEFAULT_MONTHLY_GOAL_CENTS) or DEFAULT_MONTHLY_GOAL_CENTS,
    )


def to_client(row) -> Client:
    d = _rec_to_dict(row)
    return Client(
        id=d["id"],
        name=_text(d.get("name")) or "---",
        tax_id=_text(d.get("tax_id")),
        phone=_text(d.get("phone")),
        email=_text(d.get("email")),
        address=_text(d.get("address")),
        type=_enum(ClientType, d.get("type"), ClientType.PF),
        notes=_text(d.get("notes")),
    )


def to_service(row) -> ServiceTemplate:
    d = _rec_to_dict(row)
    return ServiceTemplate(
        id=d["id"],
        name=_text(d.get("name")) or "---",
        description=_text(d.get("description")),
        default_price_cents=max(0, _int(d.get("default_price_cents"))),
        type=_enum(ServiceType, d.get("type"), ServiceType.PACKAGE),
    )


def to_quote_item(row) -> QuoteItem:
    d = _rec_to_dict(row)
    return QuoteItem(
        name=_text(d.get("name")),
        description=_text(d.get("description")),
        unit_price_cents=max(0, _int(d.get("unit_price_cents"))),
        quantity=max(1, _int(d.get("quantity"), 1)),
        type=_enum(ServiceType, d.get("type"), ServiceType.PACKAGE),
    )


def to_quote(row, items: List[QuoteItem]) -> Quote:
    d = _rec_to_dict(row)
    return Quote(
        id=d["id"],
        number=_text(d.get("number")),
        client_id=_text(d.get("client_id")),
        date=d["date"],
        valid_until=d.get("valid_until"),
        status=_enum(QuoteStatus, d.get("status"), QuoteStatus.DRAFT),
        items=items,
        discount_cents=max(0, _int(d.get("discount_cents"))),
        extra_fees_cents=max(0, _int(d.get("extra_fees_cents"))),
        payment_method=_enum(PaymentMethod, d.get("payment_method"), PaymentMethod.PIX),
        payment_conditions=_text(d.get("payment_conditions")),
        notes=d.get("notes") or None,
        total_cents=_int(d.get("total_cents")),
    )


def to_transaction(row) -> Transaction:
    d = _rec_to_dict(row)
    return Transaction(
        id=d["id"],
        description=_text(d.get("description")),
        amount_cents=_int(d.get("amount_cents")),
        type=_enum(TransactionType, d.get("type"), TransactionType.EXPENSE),
        category=_text(d.get("category")) or "Geral",
        date=d["date"],
    )


# ---- Usuários ----
@store_call
async def fetch_user(user_id: str) -> Optional[User]:
    utbl = models.User.__table__
    row = await database.fetch_one(select(utbl).where(utbl.c.id == user_id))
    return to_user(row) if row else None


@store_call
async def fetch_user_credentials(email: str) -> Optional[dict]:
    utbl = models.User.__table__
    row = await database.fetch_one(select(utbl).where(utbl.c.email == email))
    return _rec_to_dict(row) if row else None


@store_call
async def create_user(email: str, hashed_password: str) -> User:
    utbl = models.User.__table__
    uid = new_id()
    await database.execute(utbl.insert().values(
        id=uid, email=email, hashed_password=hashed_password,
        role=UserRole.PHOTOGRAPHER.value, is_blocked=False,
    ))
    return User(id=uid, email=email)


@store_call
async def set_user_role(user_id: str, role: UserRole) -> None:
    utbl = models.User.__table__
    await database.execute(utbl.update().where(utbl.c.id == user_id).values(role=role.value))


# ---- Perfil ----
def _profile_values(profile: Profile) -> Dict[str, Any]:
    return profile.model_dump()


@store_call
async def fetch_profile(user_id: str) -> Optional[Profile]:
    ptbl = models.Profile.__table__
    row = await database.fetch_one(select(ptbl).where(ptbl.c.user_id == user_id))
    return to_profile(row) if row else None


@store_call
async def insert_profile(user_id: str, profile: Profile) -> Profile:
    ptbl = models.Profile.__table__
    await database.execute(ptbl.insert().values(id=new_id(), user_id=user_id, **_profile_values(profile)))
    return profile


@store_call
async def upsert_profile(user_id: str, profile: Profile) -> Profile:
    ptbl = models.Profile.__table__
    existing = await database.fetch_one(select(ptbl.c.id).where(ptbl.c.user_id == user_id))
    if existing:
        await database.execute(
            ptbl.update().where(ptbl.c.user_id == user_id).values(**_profile_values(profile))
        )
    else:
        await database.execute(ptbl.insert().values(id=new_id(), user_id=user_id, **_profile_values(profile)))
    return profile


@store_call
async def list_profiles_with_roles() -> List[AdminProfileOut]:
    ptbl = models.Profile.__table__
    utbl = models.User.__table__
    rows = await database.fetch_all(
        select(
            ptbl.c.id, ptbl.c.user_id, ptbl.c.name, ptbl.c.email, ptbl.c.studio_name,
            ptbl.c.created_at, utbl.c.role,
        )
        .select_from(ptbl.outerjoin(utbl, utbl.c.id == ptbl.c.user_id))
        .order_by(ptbl.c.created_at.desc())
    )
    out = []
    for r in rows:
        d = _rec_to_dict(r)
        out.append(AdminProfileOut(
            id=d["id"],
            user_id=d["user_id"],
            name=_text(d.get("name")),
            email=_text(d.get("email")),
            studio_name=d.get("studio_name") or None,
            role=_enum(UserRole, d.get("role"), UserRole.PHOTOGRAPHER),
            created_at=d.get("created_at"),
        ))
    return out


@store_call
async def fetch_profile_owner(profile_id: str) -> Optional[str]:
    ptbl = models.Profile.__table__
    row = await database.fetch_one(select(ptbl.c.user_id).where(ptbl.c.id == profile_id))
    return _rec_to_dict(row)["user_id"] if row else None


@store_call
async def delete_profile(profile_id: str) -> None:
    ptbl = models.Profile.__table__
    await database.execute(ptbl.delete().where(ptbl.c.id == profile_id))


# ---- Clientes ----
@store_call
async def list_clients(user_id: str, q: Optional[str] = None) -> List[Client]:
    tbl = models.Client.__table__
    cond = tbl.c.user_id == user_id
    if q:
        cond = and_(cond, tbl.c.name.ilike(f"%{q}%"))
    rows = await database.fetch_all(select(tbl).where(cond).order_by(tbl.c.name))
    return [to_client(r) for r in rows]


@store_call
async def get_client(user_id: str, client_id: str) -> Optional[Client]:
    tbl = models.Client.__table__
    row = await database.fetch_one(
        select(tbl).where(and_(tbl.c.id == client_id, tbl.c.user_id == user_id))
    )
    return to_client(row) if row else None


@store_call
async def insert_client(user_id: str, payload: ClientCreate) -> Client:
    tbl = models.Client.__table__
    cid = new_id()
    values = payload.model_dump(mode="json")
    await database.execute(tbl.insert().values(id=cid, user_id=user_id, **values))
    return Client(id=cid, **values)


@store_call
async def update_client(user_id: str, client: Client) -> Client:
    tbl = models.Client.__table__
    values = client.model_dump(mode="json", exclude={"id"})
    await database.execute(
        tbl.update().where(and_(tbl.c.id == client.id, tbl.c.user_id == user_id)).values(**values)
    )
    return client


@store_call
async def delete_client(user_id: str, client_id: str) -> None:
    tbl = models.Client.__table__
    await database.execute(tbl.delete().where(and_(tbl.c.id == client_id, tbl.c.user_id == user_id)))


# ---- Catálogo ----
@store_call
async def list_services(user_id: str, q: Optional[str] = None) -> List[ServiceTemplate]:
    tbl = models.Service.__table__
    cond = tbl.c.user_id == user_id
    if q:
        cond = and_(cond, tbl.c.name.ilike(f"%{q}%"))
    rows = await database.fetch_all(select(tbl).where(cond).order_by(tbl.c.name))
    return [to_service(r) for r in rows]


@store_call
async def get_service(user_id: str, service_id: str) -> Optional[ServiceTemplate]:
    tbl = models.Service.__table__
    row = await database.fetch_one(
        select(tbl).where(and_(tbl.c.id == service_id, tbl.c.user_id == user_id))
    )
    return to_service(row) if row else None


@store_call
async def insert_service(user_id: str, payload: ServiceCreate) -> ServiceTemplate:
    tbl = models.Service.__table__
    sid = new_id()
    values = payload.model_dump(mode="json")
    await database.execute(tbl.insert().values(id=sid, user_id=user_id, **values))
    return ServiceTemplate(id=sid, **values)


@store_call
async def update_service(user_id: str, service: ServiceTemplate) -> ServiceTemplate:
    tbl = models.Service.__table__
    values = service.model_dump(mode="json", exclude={"id"})
    await database.execute(
        tbl.update().where(and_(tbl.c.id == service.id, tbl.c.user_id == user_id)).values(**values)
    )
    return service


@store_call
async def delete_service(user_id: str, service_id: str) -> None:
    tbl = models.Service.__table__
    await database.execute(tbl.delete().where(and_(tbl.c.id == service_id, tbl.c.user_id == user_id)))


# ---- Orçamentos ----
async def _items_by_quote(quote_ids: List[str]) -> Dict[str, List[QuoteItem]]:
    grouped: Dict[str, List[QuoteItem]] = defaultdict(list)
    if not quote_ids:
        return grouped
    itbl = models.QuoteItem.__table__
    rows = await database.fetch_all(
        select(itbl).where(itbl.c.quote_id.in_(quote_ids)).order_by(itbl.c.quote_id, itbl.c.position)
    )
    for r in rows:
        grouped[_rec_to_dict(r)["quote_id"]].append(to_quote_item(r))
    return grouped


@store_call
async def list_quotes(user_id: str, status: Optional[QuoteStatus] = None) -> List[Quote]:
    """Orçamentos do usuário com os itens, do mais novo para o mais antigo."""
    qtbl = models.Quote.__table__
    cond = qtbl.c.user_id == user_id
    if status:
        cond = and_(cond, qtbl.c.status == status.value)
    rows = await database.fetch_all(select(qtbl).where(cond).order_by(qtbl.c.created_at.desc()))
    items = await _items_by_quote([_rec_to_dict(r)["id"] for r in rows])
    return [to_quote(r, items.get(_rec_to_dict(r)["id"], [])) for r in rows]


@store_call
async def get_quote(user_id: str, quote_id: str) -> Optional[Quote]:
    qtbl = models.Quote.__table__
    row = await database.fetch_one(
        select(qtbl).where(and_(qtbl.c.id == quote_id, qtbl.c.user_id == user_id))
    )
    if not row:
        return None
    items = await _items_by_quote([quote_id])
    return to_quote(row, items.get(quote_id, []))


@store_call
async def save_quote(user_id: str, quote_id: Optional[str], number: str,
                     payload: QuoteBase, total_cents: int) -> Quote:
    """
    Grava cabeçalho + itens numa única transação.

    Em edição os itens antigos são apagados e reinseridos (sem diff por item);
    se qualquer passo falhar nada é gravado.
    """
    qtbl = models.Quote.__table__
    itbl = models.QuoteItem.__table__
    header = dict(
        number=number,
        client_id=payload.client_id,
        date=payload.date,
        valid_until=payload.valid_until,
        status=payload.status.value,
        discount_cents=payload.discount_cents,
        extra_fees_cents=payload.extra_fees_cents,
        payment_method=payload.payment_method.value,
        payment_conditions=payload.payment_conditions,
        notes=payload.notes,
        total_cents=total_cents,
    )
    async with database.transaction():
        if quote_id:
            await database.execute(
                qtbl.update().where(and_(qtbl.c.id == quote_id, qtbl.c.user_id == user_id)).values(**header)
            )
            await database.execute(itbl.delete().where(itbl.c.quote_id == quote_id))
        else:
            quote_id = new_id()
            await database.execute(qtbl.insert().values(id=quote_id, user_id=user_id, **header))
        for pos, item in enumerate(payload.items):
            await database.execute(itbl.insert().values(
                id=new_id(),
                quote_id=quote_id,
                position=pos,
                name=item.name,
                description=item.description,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                type=item.type.value,
            ))
    return Quote(id=quote_id, total_cents=total_cents, **payload.model_dump(exclude={"client_id", "number"}),
                 client_id=payload.client_id, number=number)


@store_call
async def update_quote_status(quote_id: str, status: QuoteStatus, user_id: Optional[str] = None) -> None:
    qtbl = models.Quote.__table__
    cond = qtbl.c.id == quote_id
    if user_id is not None:
        cond = and_(cond, qtbl.c.user_id == user_id)
    await database.execute(qtbl.update().where(cond).values(status=status.value))


@store_call
async def delete_quote(user_id: str, quote_id: str) -> None:
    qtbl = models.Quote.__table__
    itbl = models.QuoteItem.__table__
    async with database.transaction():
        await database.execute(itbl.delete().where(itbl.c.quote_id == quote_id))
        await database.execute(qtbl.delete().where(and_(qtbl.c.id == quote_id, qtbl.c.user_id == user_id)))


@store_call
async def search_quote_ids(user_id: str, q: str) -> List[str]:
    """Ids dos orçamentos cujo número ou nome do cliente contém ``q``."""
    qtbl = models.Quote.__table__
    ctbl = models.Client.__table__
    rows = await database.fetch_all(
        select(qtbl.c.id)
        .select_from(qtbl.outerjoin(ctbl, ctbl.c.id == qtbl.c.client_id))
        .where(and_(
            qtbl.c.user_id == user_id,
            or_(qtbl.c.number.ilike(f"%{q}%"), ctbl.c.name.ilike(f"%{q}%")),
        ))
    )
    return [_rec_to_dict(r)["id"] for r in rows]


# ---- Lançamentos ----
@store_call
async def list_transactions(user_id: str) -> List[Transaction]:
    ttbl = models.Transaction.__table__
    rows = await database.fetch_all(
        select(ttbl).where(ttbl.c.user_id == user_id).order_by(ttbl.c.date.desc())
    )
    return [to_transaction(r) for r in rows]


@store_call
async def insert_transaction(user_id: str, tx: Transaction) -> Transaction:
    ttbl = models.Transaction.__table__
    await database.execute(ttbl.insert().values(
        id=tx.id,
        user_id=user_id,
        description=tx.description,
        amount_cents=tx.amount_cents,
        type=tx.type.value,
        category=tx.category,
        date=tx.date,
    ))
    return tx


@store_call
async def delete_transaction(user_id: str, tx_id: str) -> bool:
    ttbl = models.Transaction.__table__
    owned = await database.fetch_one(
        select(ttbl.c.id).where(and_(ttbl.c.id == tx_id, ttbl.c.user_id == user_id))
    )
    if not owned:
        return False
    await database.execute(ttbl.delete().where(and_(ttbl.c.id == tx_id, ttbl.c.user_id == user_id)))
    return True
