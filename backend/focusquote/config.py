import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://postgres:postgres@db:5432/postgres")
SECRET_KEY = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET") or "dev_change_me"
ALGO = "HS256"
ACCESS_TOKEN_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", str(60 * 60 * 24)))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL") or os.getenv("BASE_URL") or "http://localhost:8000"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_IDLE_SECONDS = int(os.getenv("SESSION_IDLE_SECONDS", str(60 * 60)))

# Regras de negócio
QUOTE_VALIDITY_DAYS = int(os.getenv("QUOTE_VALIDITY_DAYS", "15"))
DEFAULT_MONTHLY_GOAL_CENTS = int(os.getenv("DEFAULT_MONTHLY_GOAL_CENTS", "500000"))
DEFAULT_PAYMENT_CONDITIONS = "50% reserva + 50% entrega"
