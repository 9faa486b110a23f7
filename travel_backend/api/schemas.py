"""
Pydantic models for request parsing and response serialization.

Request models only check JSON shape and types; length and enum rules live in
validation.py and run inside the stores. Unknown keys (an "owner" field, for
instance) are ignored.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    username: str = Field(..., description="Case-insensitive username")
    password: str = Field(..., description="Plain-text password, at least 8 characters on register")


class AuthOut(BaseModel):
    success: Literal[True] = True
    username: str
    access_token: str = Field(..., serialization_alias="accessToken")
    user_id: int = Field(..., serialization_alias="userId")


class ProfileOut(BaseModel):
    success: Literal[True] = True
    username: str
    user_id: int = Field(..., serialization_alias="userId")


class NoteFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    heading: Optional[str] = Field(None, description="1-50 characters")
    message: Optional[str] = Field(None, description="5-140 characters")
    tags: Optional[str] = Field(None, description="One of the supported note tags")


class PackingItemFields(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    heading: Optional[str] = Field(None, description="1-50 characters")
    message: Optional[str] = Field(None, description="5-140 characters")
    is_completed: Optional[bool] = Field(None, alias="isCompleted")


class CompletedUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_completed: bool = Field(..., alias="isCompleted")


class NoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    heading: str
    message: str
    tags: str
    created_at: datetime = Field(..., serialization_alias="createdAt")
    owner_id: int = Field(..., serialization_alias="owner")


class PackingItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    heading: str
    message: str
    is_completed: bool = Field(..., serialization_alias="isCompleted")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    owner_id: int = Field(..., serialization_alias="owner")


class WeatherOut(BaseModel):
    success: Literal[True] = True
    response: str
