"""
Pydantic models for request/response schemas.

JSON bodies use camelCase keys (`isAdmin`, `createdAt`) to match the stored
records; Python code uses the snake_case attribute names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request Models


class UserSignUp(CamelModel):
    """Model for user registration."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)


class UserLogin(CamelModel):
    """Model for user login."""

    email: EmailStr
    password: str = Field(min_length=1)


class UserCreate(CamelModel):
    """Model for admin-side user creation."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    is_admin: bool = False


class UserUpdate(CamelModel):
    """Model for updating a user. Omitted or null fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=72)
    is_admin: Optional[bool] = None


class ProductCreate(CamelModel):
    """Model for product creation."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)
    stock: int = Field(default=0, ge=0)


class ProductUpdate(CamelModel):
    """Model for updating a product. A price or stock of 0 is a real value."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    category: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0)


# Response Models


class UserResponse(CamelModel):
    """Public user shape; never carries the password hash."""

    id: str
    name: str
    email: str
    is_admin: bool
    created_at: str


class ProductResponse(CamelModel):
    """Model for product data in responses."""

    id: str
    name: str
    description: str
    price: float
    category: str
    stock: int
    created_at: str


class AuthResponse(CamelModel):
    """Model for signup/login responses."""

    message: str
    token: str
    user: UserResponse


class UserMessageResponse(CamelModel):
    message: str
    user: UserResponse


class ProductMessageResponse(CamelModel):
    message: str
    product: ProductResponse


class MessageResponse(CamelModel):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(CamelModel):
    """Error response model."""

    success: bool = False
    error: str
    message: str


class HealthResponse(CamelModel):
    status: str
    service: str
    collections: List[str]
