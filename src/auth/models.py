from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    clerk_id = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=False, index=True)
    username = Column(String, nullable=True, index=True)  # Not unique: Clerk may send an empty one
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    photo = Column(String, nullable=False, default="")  # Clerk image_url
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
