from fastapi import Depends, FastAPI, HTTPException, Request
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from contextlib import asynccontextmanager

from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import traceback
import logging

logger = logging.getLogger("uvicorn.error")

from . import models
from .config import settings
from .database import get_async_db, init_db, close_db
from .auth.middleware import ClerkAuthMiddleware
from .webhooks.api import router as webhooks_router
from .webhooks.exceptions import WebhookError


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.clerk_webhook_secret:
        logger.warning("CLERK_WEBHOOK_SECRET is not set; Clerk webhooks will be rejected")
    await init_db()
    yield
    await close_db()

app = FastAPI(
    title="Clerk User Sync",
    description="Mirrors Clerk users into PostgreSQL and guards routes with Clerk sessions",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(ClerkAuthMiddleware)

# Outermost, so CORS preflights never reach the session check.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=200
)

app.include_router(webhooks_router)

@app.exception_handler(WebhookError)
async def webhook_exception_handler(request: Request, exc: WebhookError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    body = await request.body()
    logger.error(
        f"Validation error for request {request.url}: {exc.errors()}\n"
        f"Body: {body}\n"
        f"Traceback: {traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "body": exc.body},
    )

@app.get("/")
async def root():
    return {"message": "Welcome to the Clerk user sync backend!"}

@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_async_db)):
    try:
        await db.execute(text("SELECT 1"))
    except OperationalError:
        raise HTTPException(
            status_code=500, detail="Database connection failed"
        )

    return {
        "status": "ok",
        "database": "connected"
    }
