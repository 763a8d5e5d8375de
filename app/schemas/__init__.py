from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from uuid import UUID
from datetime import datetime


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    """Session issued at login; ``refresh_token`` only for "remember me"."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    redirect_to: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    remember_me: bool = False


class AccountCreate(BaseModel):
    """Sign-up and create-organiser form."""
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    confirm_password: str

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return _strip(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation password do not match")
        return self


class AccountOut(BaseModel):
    id: UUID
    email: EmailStr
    full_name: str
    role_names: List[str]
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("role_names", mode="before")
    @classmethod
    def sorted_roles(cls, value):
        return sorted(value)


class RegisterResponse(BaseModel):
    account: AccountOut
    access_token: str
    token_type: str = "bearer"
    redirect_to: str


class AuthPageOut(BaseModel):
    page: str
    fields: List[str]


class MessageOut(BaseModel):
    message: str


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    location: str = Field(..., min_length=1, max_length=300)
    event_date: datetime

    @field_validator("title", "description", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    location: Optional[str] = Field(None, min_length=1, max_length=300)
    event_date: Optional[datetime] = None

    @field_validator("title", "description", "location", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)


class EventOut(BaseModel):
    id: int
    title: str
    description: str
    location: str
    event_date: datetime
    owner_id: UUID
    owner_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class GuestOut(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    registered_at: datetime

    class Config:
        from_attributes = True


class EventDetailOut(EventOut):
    guests: List[GuestOut] = []


class OrganiserOut(BaseModel):
    id: UUID
    full_name: str
    email: str
    created_at: datetime
    event_count: int


class DashboardOut(BaseModel):
    total_events: int
    total_organisers: int
    total_guests: int
    upcoming_events: List[EventOut]


class PublicEventOut(BaseModel):
    """What the public registration form shows about an event."""
    id: int
    title: str
    description: str
    location: str
    event_date: datetime
    owner_name: Optional[str] = None

    class Config:
        from_attributes = True


# Public guest API: camelCase on the wire

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class GuestRegistrationResponse(CamelModel):
    success: bool
    message: str
    guest_id: Optional[int] = None


class GuestDetail(CamelModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    event_id: int
    event_title: Optional[str] = None
    registered_at: datetime


class GuestSummary(CamelModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    registered_at: datetime
