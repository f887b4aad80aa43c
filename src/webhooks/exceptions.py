"""
Errors raised while handling a Clerk webhook.
Each one maps to the HTTP status and `{"error": ...}` body returned to Clerk.
"""
from fastapi import status


class WebhookError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Error occurred while processing webhook"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(WebhookError):
    default_message = "Please add CLERK_WEBHOOK_SECRET from Clerk Dashboard to .env"


class MissingHeaderError(WebhookError):
    default_message = "Error occurred -- no svix headers"


class VerificationError(WebhookError):
    default_message = "Webhook verification failed"


class ValidationError(WebhookError):
    pass


class NotFoundError(WebhookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found or could not be deleted"


class UnexpectedError(WebhookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to delete user"


class WebhookProcessingError(WebhookError):
    pass
