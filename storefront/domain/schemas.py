# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer
from typing import Annotated, List, Optional
from decimal import Decimal
from datetime import datetime


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# money is kept as Decimal internally but goes out as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ---------------------------------------------------------------- auth

class SignupIn(BaseModel):
    """Schema for creating an account."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=72)


class LoginIn(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRead(BaseModel):
    """Public part of a user record (also what a token carries)."""

    id: int
    email: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserRead


class UserOut(BaseModel):
    user: UserRead


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- cart

class ItemIn(BaseModel):
    """Schema for adding an item to the cart."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    img: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class SavedItemIn(BaseModel):
    """Schema for saving an item for later."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    img: str = Field(..., min_length=1)


class QuantityIn(BaseModel):
    # range is checked by the cart rules so the error reads "Quantity must be at least 1"
    quantity: Optional[int] = None


class GuestCartIn(BaseModel):
    """Cart collected by a client before the user logged in."""

    items: List[ItemIn] = Field(default_factory=list)
    saved_items: List[SavedItemIn] = Field(default_factory=list, alias="savedItems")

    model_config = ConfigDict(populate_by_name=True)


class CartItemOut(BaseModel):
    id: str
    title: str
    price: float
    img: str
    quantity: int


class SavedItemOut(BaseModel):
    id: str
    title: str
    price: float
    img: str


class CartOut(BaseModel):
    success: bool = True
    cart: List[CartItemOut]
    count: int


class SavedOut(BaseModel):
    success: bool = True
    saved_items: List[SavedItemOut] = Field(alias="savedItems")
    count: Optional[int] = None
    message: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CountOut(BaseModel):
    success: bool = True
    count: int


class CartMutationOut(BaseModel):
    success: bool = True
    message: str
    cart: List[CartItemOut]
    total_items: int = Field(alias="totalItems")
    saved_items: Optional[List[SavedItemOut]] = Field(default=None, alias="savedItems")

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------- orders

class OrderItemIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    img: str = ""
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    """Schema for placing an order. Totals come from the client."""

    items: List[OrderItemIn] = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)
    tax: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)


class OrderItemOut(BaseModel):
    id: str
    title: str
    price: Money
    img: str
    quantity: int


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    items: List[OrderItemOut]
    subtotal: Money
    tax: Money
    total: Money
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# ---------------------------------------------------------------- payments

class PaymentIntentIn(BaseModel):
    """
    Validation of payment_method_id and amount is done by the payment service
    so the error messages match what the checkout page expects.
    """

    payment_method_id: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    email: Optional[str] = None
