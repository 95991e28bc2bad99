import uuid

from sqlalchemy import Column, Integer, String, ForeignKey, BigInteger, DateTime, Date, Boolean, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from focusquote.db import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="photographer")    # admin/photographer
    is_blocked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="")
    studio_name = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    whatsapp = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    website = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    default_terms = Column(Text, nullable=True)
    monthly_goal_cents = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    user = relationship("User")

class Client(Base):
    __tablename__ = "clients"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False, index=True)
    tax_id = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    type = Column(String, nullable=False, default="PF")                # PF/PJ
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class Service(Base):
    __tablename__ = "services"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    default_price_cents = Column(BigInteger, nullable=False, default=0)
    type = Column(String, nullable=False, default="package")           # package/hourly/daily

class Quote(Base):
    __tablename__ = "quotes"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # DDMMYYYYHHmm, pode colidir dentro do mesmo minuto
    number = Column(String, index=True, nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False)
    date = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="draft")           # draft/sent/viewed/approved/declined
    discount_cents = Column(BigInteger, nullable=False, default=0)
    extra_fees_cents = Column(BigInteger, nullable=False, default=0)
    payment_method = Column(String, nullable=False, default="pix")
    payment_conditions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    total_cents = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    client = relationship("Client")

class QuoteItem(Base):
    __tablename__ = "quote_items"
    id = Column(String(36), primary_key=True, default=new_id)
    quote_id = Column(String(36), ForeignKey("quotes.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    unit_price_cents = Column(BigInteger, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)
    type = Column(String, nullable=False, default="package")

class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    description = Column(String, nullable=False)
    amount_cents = Column(BigInteger, nullable=False, default=0)
    type = Column(String, nullable=False, default="expense")           # income/expense
    category = Column(String, nullable=False, default="Geral")
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
