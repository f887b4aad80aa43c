import binascii
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Header
from sqlalchemy.ext.asyncio import AsyncSession
from svix.webhooks import Webhook, WebhookVerificationError

from ..database import get_async_db
from ..auth.clerk import ClerkClient, clerk_client
from ..config import settings
from ..routes import WEBHOOK_PATH
from .exceptions import (ConfigurationError, MissingHeaderError, VerificationError,
                         WebhookError, WebhookProcessingError)
from .service import ClerkWebhookService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhooks"])


def get_webhook_secret() -> Optional[str]:
    return settings.clerk_webhook_secret


def get_clerk_client() -> ClerkClient:
    return clerk_client


@router.post(WEBHOOK_PATH)
async def handle_clerk_webhook(
    request: Request,
    svix_id: str = Header(None),
    svix_timestamp: str = Header(None),
    svix_signature: str = Header(None),
    db: AsyncSession = Depends(get_async_db),
    webhook_secret: Optional[str] = Depends(get_webhook_secret),
    clerk: ClerkClient = Depends(get_clerk_client),
):
    if not webhook_secret:
        logger.error("Received Clerk webhook but CLERK_WEBHOOK_SECRET is not configured")
        raise ConfigurationError()

    if not svix_id or not svix_timestamp or not svix_signature:
        raise MissingHeaderError()

    headers = {
        "svix-id": svix_id,
        "svix-timestamp": svix_timestamp,
        "svix-signature": svix_signature,
    }

    payload = await request.body()

    try:
        wh = Webhook(webhook_secret)
    except (binascii.Error, ValueError) as e:
        logger.error(f"CLERK_WEBHOOK_SECRET is malformed: {e}")
        raise ConfigurationError("CLERK_WEBHOOK_SECRET is malformed; copy it again from Clerk Dashboard")

    try:
        wh.verify(payload, headers)
    except WebhookVerificationError as e:
        logger.warning(f"Webhook {svix_id} failed verification: {e}")
        raise VerificationError(f"Webhook verification failed: {e}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Webhook {svix_id} has a malformed JSON body")
        raise VerificationError("Webhook body is not valid JSON")

    # Newer svix releases only check the signature and return nothing.
    try:
        evt = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Webhook {svix_id} has a malformed JSON body")
        raise VerificationError("Webhook body is not valid JSON")

    event = ClerkWebhookService.parse_event(evt)
    logger.info(f"Processing Clerk webhook {svix_id} ({event.type})")

    try:
        return await ClerkWebhookService.handle_event(event, db, clerk)
    except WebhookError:
        raise
    except Exception as e:
        logger.exception(f"Error processing webhook {svix_id}: {e}")
        raise WebhookProcessingError()
