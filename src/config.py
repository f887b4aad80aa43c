from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):
    database_url: str
    clerk_domain: str
    clerk_secret_key: str | None = None
    clerk_webhook_secret: str | None = None

    # Clerk Backend API
    clerk_api_url: str = "https://api.clerk.com/v1"

    # Where unauthenticated page requests are sent. API requests always get a 401.
    clerk_sign_in_url: str | None = None

    debug: bool = True

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', '.env'),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
