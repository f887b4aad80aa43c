from pydantic import BaseModel
from typing import Any, Dict, List, Optional

class ClerkWebhookPayload(BaseModel):
    data: Dict[str, Any]
    object: str = "event"
    type: str

class EmailAddress(BaseModel):
    id: Optional[str] = None
    email_address: str

class UserEventData(BaseModel):
    """`data` of user.created and user.updated events."""
    id: Optional[str] = None
    email_addresses: List[EmailAddress] = []
    primary_email_address_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    image_url: Optional[str] = None

    def primary_email(self) -> Optional[str]:
        for address in self.email_addresses:
            if address.id and address.id == self.primary_email_address_id:
                return address.email_address
        if self.email_addresses:
            return self.email_addresses[0].email_address
        return None

    def default_username(self) -> str:
        return self.username or f"{self.first_name or ''}{self.last_name or ''}".lower()

class UserDeletedData(BaseModel):
    id: Optional[str] = None
    deleted: Optional[bool] = None
