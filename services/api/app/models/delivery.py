from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AgentSignupRequest(BaseModel):
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=13)
    password: str = Field(..., min_length=6, max_length=24)
    first_name: str = Field(..., min_length=2, max_length=20)
    last_name: str = Field(..., min_length=2, max_length=20)
    address: str = Field(..., min_length=3, max_length=57)
    pincode: str = Field(..., min_length=1)


class AgentStatusRequest(BaseModel):
    lat: float | None = None
    lng: float | None = None


class AgentVerifyRequest(BaseModel):
    id: str = Field(..., min_length=1)
    status: bool


class AgentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    phone: str
    first_name: str
    last_name: str
    address: str
    pincode: str
    verified: bool
    is_available: bool
    lat: float
    lng: float
