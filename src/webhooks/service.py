"""
Applies verified Clerk webhook events to the local users table.
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.clerk import ClerkClient
from ..auth.crud import UserDAO
from ..auth.models import User
from ..auth.schema import UserCreate, UserSchema, UserUpdate
from .exceptions import NotFoundError, UnexpectedError, ValidationError
from .schemas import ClerkWebhookPayload, UserDeletedData, UserEventData

logger = logging.getLogger(__name__)

USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"


def serialize_user(user: Optional[User]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return UserSchema.model_validate(user).model_dump(mode="json")


class ClerkWebhookService:

    @staticmethod
    def parse_event(evt: Any) -> ClerkWebhookPayload:
        try:
            return ClerkWebhookPayload.model_validate(evt)
        except PydanticValidationError as e:
            raise ValidationError(f"Malformed webhook event: {e.error_count()} invalid field(s)")

    @staticmethod
    async def handle_event(
        event: ClerkWebhookPayload, db: AsyncSession, clerk: ClerkClient
    ) -> Dict[str, Any]:
        if event.type == USER_CREATED:
            return await ClerkWebhookService.user_created(event.data, db, clerk)
        if event.type == USER_UPDATED:
            return await ClerkWebhookService.user_updated(event.data, db)
        if event.type == USER_DELETED:
            return await ClerkWebhookService.user_deleted(event.data, db)

        logger.info(f"Ignoring Clerk event {event.type}")
        return {"message": "Webhook processed", "eventType": event.type}

    @staticmethod
    async def user_created(
        data: Dict[str, Any], db: AsyncSession, clerk: ClerkClient
    ) -> Dict[str, Any]:
        user_data = UserEventData.model_validate(data)

        email = user_data.primary_email()
        if not email:
            raise ValidationError("No email address provided")
        if not user_data.id:
            raise ValidationError("No user ID provided")

        user = UserCreate(
            clerk_id=user_data.id,
            email=email,
            username=user_data.default_username(),
            first_name=user_data.first_name or "",
            last_name=user_data.last_name or "",
            photo=user_data.image_url or "",
        )

        new_user = await UserDAO.create_user(db, user)

        # Redelivered user.created: the row exists but may not be linked yet.
        linked_user = new_user or await UserDAO.get_user_by_clerk_id(db, user_data.id)
        if linked_user:
            await clerk.update_user_metadata(
                user_data.id, public_metadata={"userId": linked_user.id}
            )

        return {"message": "OK", "user": serialize_user(new_user)}

    @staticmethod
    async def user_updated(data: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
        user_data = UserEventData.model_validate(data)
        if not user_data.id:
            raise ValidationError("No user ID provided")

        update = UserUpdate(
            first_name=user_data.first_name or "",
            last_name=user_data.last_name or "",
            username=user_data.default_username(),
            photo=user_data.image_url or "",
        )

        updated_user = await UserDAO.update_user_by_clerk_id(db, user_data.id, update)
        return {"message": "OK", "user": serialize_user(updated_user)}

    @staticmethod
    async def user_deleted(data: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
        user_data = UserDeletedData.model_validate(data)
        if not user_data.id:
            raise ValidationError("No user ID provided for deletion")

        try:
            deleted_user = await UserDAO.delete_user_by_clerk_id(db, clerk_id=user_data.id)
        except Exception as e:
            logger.error(f"Error deleting user {user_data.id}: {e}")
            raise UnexpectedError()

        if not deleted_user:
            raise NotFoundError()

        return {
            "message": "User deleted successfully",
            "userId": user_data.id,
            "user": serialize_user(deleted_user),
        }
