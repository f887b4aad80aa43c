from src.database import Base

# Import all models to register them with SQLAlchemy Base
from src.auth.models import User
