from enum import Enum
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import date, datetime
import datetime as dt


# ---- Enumerações ----
class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    APPROVED = "approved"
    DECLINED = "declined"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

class ServiceType(str, Enum):
    PACKAGE = "package"
    HOURLY = "hourly"
    DAILY = "daily"

    @property
    def label(self) -> str:
        return SERVICE_TYPE_LABELS[self]

class PaymentMethod(str, Enum):
    PIX = "pix"
    CARD = "card"
    TRANSFER = "transfer"
    CASH = "cash"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]

class ClientType(str, Enum):
    PF = "PF"   # pessoa física
    PJ = "PJ"   # pessoa jurídica

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

class UserRole(str, Enum):
    ADMIN = "admin"
    PHOTOGRAPHER = "photographer"


STATUS_LABELS = {
    QuoteStatus.DRAFT: "Rascunho",
    QuoteStatus.SENT: "Enviado",
    QuoteStatus.VIEWED: "Visualizado",
    QuoteStatus.APPROVED: "Aprovado",
    QuoteStatus.DECLINED: "Recusado",
}
SERVICE_TYPE_LABELS = {
    ServiceType.PACKAGE: "Pacote",
    ServiceType.HOURLY: "Hora",
    ServiceType.DAILY: "Diária",
}
PAYMENT_METHOD_LABELS = {
    PaymentMethod.PIX: "Pix",
    PaymentMethod.CARD: "Cartão de Crédito",
    PaymentMethod.TRANSFER: "Transferência",
    PaymentMethod.CASH: "Dinheiro",
}


# ---- Auth ----
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class User(BaseModel):
    id: str
    email: str
    role: UserRole = UserRole.PHOTOGRAPHER
    is_blocked: bool = False

class MeOut(User):
    pass


# ---- Perfil ----
class Profile(BaseModel):
    name: str = ""
    studio_name: Optional[str] = None
    tax_id: str = ""
    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    address: str = ""
    website: Optional[str] = None
    instagram: Optional[str] = None
    default_terms: str = ""
    monthly_goal_cents: int = Field(default=500000, ge=0)

class ProfileUpdate(Profile):
    name: str = Field(min_length=1, max_length=200)


# ---- Clientes ----
class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    tax_id: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    type: ClientType = ClientType.PF
    notes: str = ""

class ClientCreate(ClientBase):
    pass

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    type: Optional[ClientType] = None
    notes: Optional[str] = None

class Client(ClientBase):
    id: str
    model_config = ConfigDict(from_attributes=True)


# ---- Catálogo de serviços ----
class ServiceBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    default_price_cents: int = Field(default=0, ge=0)
    type: ServiceType = ServiceType.PACKAGE

class ServiceCreate(ServiceBase):
    pass

class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    default_price_cents: Optional[int] = Field(default=None, ge=0)
    type: Optional[ServiceType] = None

class ServiceTemplate(ServiceBase):
    id: str
    model_config = ConfigDict(from_attributes=True)


# ---- Orçamentos ----
class QuoteItem(BaseModel):
    name: str = Field(default="", max_length=300)
    description: str = ""
    unit_price_cents: int = Field(default=0, ge=0)
    quantity: int = Field(default=1, ge=1)
    type: ServiceType = ServiceType.PACKAGE

class QuoteBase(BaseModel):
    client_id: Optional[str] = None
    date: date
    valid_until: Optional[date] = None
    status: QuoteStatus = QuoteStatus.DRAFT
    items: List[QuoteItem] = Field(default_factory=list)
    discount_cents: int = Field(default=0, ge=0)
    extra_fees_cents: int = Field(default=0, ge=0)
    payment_method: PaymentMethod = PaymentMethod.PIX
    payment_conditions: str = ""
    notes: Optional[str] = None

class QuoteCreate(QuoteBase):
    # total nunca vem do cliente: é recalculado no save
    number: Optional[str] = None

class QuoteUpdate(QuoteBase):
    # ausente: mantém o status gravado
    status: Optional[QuoteStatus] = None

class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus

class Quote(QuoteBase):
    id: str
    number: str
    client_id: str
    total_cents: int = 0
    model_config = ConfigDict(from_attributes=True)

class QuoteDraftOut(QuoteBase):
    number: str
    subtotal_cents: int = 0
    total_cents: int = 0

class ShareOut(BaseModel):
    url: str
    whatsapp_url: Optional[str] = None


# ---- Financeiro ----
class TransactionCreate(BaseModel):
    description: str = Field(min_length=1, max_length=300)
    amount_cents: int = Field(gt=0)
    type: TransactionType = TransactionType.EXPENSE
    category: str = "Geral"
    date: Optional[dt.date] = None

class Transaction(BaseModel):
    id: str
    description: str
    amount_cents: int
    type: TransactionType
    category: str = "Geral"
    date: date

class FinancialRow(Transaction):
    synthetic: bool = False

class CashFlowStats(BaseModel):
    income_cents: int = 0
    expense_cents: int = 0
    balance_cents: int = 0

class CashFlowOut(BaseModel):
    start: date
    end: date
    rows: List[FinancialRow]
    stats: CashFlowStats


# ---- Relatórios ----
class QuoteReportOut(BaseModel):
    start: date
    end: date
    status: Optional[QuoteStatus] = None
    count: int
    revenue_cents: int
    approved_count: int
    pending_count: int
    quotes: List[Quote]

class DashboardOut(BaseModel):
    total: int
    approved: int
    pending: int
    revenue_cents: int
    month_revenue_cents: int
    monthly_goal_cents: int
    goal_progress_percent: int
    recent_quotes: List[Quote]


# ---- Admin ----
class AdminProfileOut(BaseModel):
    id: str
    user_id: str
    name: str = ""
    email: str = ""
    studio_name: Optional[str] = None
    role: UserRole = UserRole.PHOTOGRAPHER
    created_at: Optional[datetime] = None


# ---- Página pública ----
class PublicQuoteOut(BaseModel):
    quote: Quote
    profile: Profile
    client: Client
