"""
Database Schemas for Eventica registrations

Registration is the one record type the service persists. It is stored flat,
keyed by registrationId, in whichever backend the store is configured for.
Attribute names are snake_case in Python and camelCase on the wire and in
storage.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Registration(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    registration_id: str = Field(..., description="Server-generated id, EVT-<time>-<random>")
    first_name: str = Field(..., min_length=1, description="Attendee first name")
    last_name: str = Field(..., min_length=1, description="Attendee last name")
    email: str = Field(..., description="Attendee email")
    phone: Optional[str] = Field(None, description="Optional contact phone")
    ticket_type: Literal["general", "vip", "student"] = Field(..., description="Ticket tier")
    quantity: int = Field(..., ge=1, le=10, description="Number of tickets")
    newsletter: bool = Field(False, description="Newsletter opt-in")
    total_amount: int = Field(..., ge=0, description="Subtotal plus tax, recomputed server-side")
    status: Literal["confirmed"] = Field("confirmed", description="Only confirmed is ever set")
    created_at: str = Field(..., description="ISO-8601 UTC creation time")
    updated_at: str = Field(..., description="ISO-8601 UTC last update time")

    def to_item(self) -> dict:
        """Flat camelCase document, as persisted and returned to callers."""
        return self.model_dump(by_alias=True)
