import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from .exceptions import DatabaseException
from .models import User
from .schema import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

class UserDAO:

    @staticmethod
    async def get_user_by_clerk_id(db: AsyncSession, clerk_id: str) -> Optional[User]:
        """Get user by Clerk ID."""
        try:
            query = select(User).where(User.clerk_id == clerk_id)
            result = await db.execute(query)
            return result.scalars().first()
        except Exception as e:
            raise DatabaseException(f"get_user_by_clerk_id: {str(e)}")

    @staticmethod
    async def create_user(db: AsyncSession, user: UserCreate) -> Optional[User]:
        """
        Inserts a user mirrored from Clerk.
        Returns None when a user with the same Clerk ID already exists, which
        happens when Clerk redelivers a user.created event.
        """
        logger.info(f"Creating user with clerk_id: {user.clerk_id}")
        new_user = User(**user.model_dump())
        try:
            db.add(new_user)
            await db.commit()
            await db.refresh(new_user)
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"User with clerk_id {user.clerk_id} already exists: {e}")
            return None
        except Exception as e:
            await db.rollback()
            raise DatabaseException(f"create_user: {str(e)}")

        logger.info(f"Successfully created new user with id: {new_user.id}")
        return new_user

    @staticmethod
    async def update_user_by_clerk_id(
        db: AsyncSession, clerk_id: str, data: UserUpdate
    ) -> Optional[User]:
        """Applies a profile update to the user with the given Clerk ID, if any."""
        user = await UserDAO.get_user_by_clerk_id(db, clerk_id)
        if user is None:
            logger.info(f"No user with clerk_id {clerk_id} to update")
            return None

        for field, value in data.model_dump().items():
            setattr(user, field, value)

        try:
            await db.commit()
            await db.refresh(user)
            return user
        except Exception as e:
            await db.rollback()
            raise DatabaseException(f"update_user_by_clerk_id: {str(e)}")

    @staticmethod
    async def delete_user_by_clerk_id(db: AsyncSession, clerk_id: str) -> Optional[User]:
        """
        Deletes a user from the database based on their Clerk ID.
        Returns the deleted user, or None if there was nothing to delete.
        """
        user_to_delete = await UserDAO.get_user_by_clerk_id(db, clerk_id)
        if user_to_delete is None:
            return None

        try:
            await db.delete(user_to_delete)
            await db.commit()
            return user_to_delete
        except Exception as e:
            await db.rollback()
            raise DatabaseException(f"delete_user_by_clerk_id: {str(e)}")
