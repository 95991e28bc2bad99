import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from focusquote.config import LOG_LEVEL
from focusquote.db import database, init_db
from focusquote.errors import StoreError
from focusquote.routers import admin, auth, clients, finance, profile, public, quotes, reports, services, session

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("focusquote")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    await database.connect()
    logger.info("database connected")
    yield
    await database.disconnect()
    logger.info("database disconnected")


app = FastAPI(title="FocusQuote", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    # operação abortada; estado em memória fica como estava
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.get("/health")
async def health():
    return {"ok": True}


app.include_router(auth.router)
app.include_router(session.router)
app.include_router(profile.router)
app.include_router(clients.router)
app.include_router(services.router)
app.include_router(quotes.router)
app.include_router(finance.router)
app.include_router(reports.router)
app.include_router(admin.router)
app.include_router(public.public_router)
