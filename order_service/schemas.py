from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime

# ===============================
# Catalog Schemas
# ===============================

class Product(BaseModel):
    id: int
    name: str
    unit_price: int

    class Config:
        frozen = True

# ===============================
# Order Schemas
# ===============================

class CartItem(BaseModel):
    id: int
    quantity: int

class Customer(BaseModel):
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    address: str

    class Config:
        populate_by_name = True

class OrderCreate(BaseModel):
    items: List[CartItem]
    customer: Customer

class OrderCreated(BaseModel):
    order_id: str = Field(alias="orderId")
    total: int

    class Config:
        populate_by_name = True

class Order(BaseModel):
    id: str
    customer_name: str
    email: str
    address: str
    total: int
    status: str
    transaction_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

# ===============================
# Payment Schemas
# ===============================

class PaymentVerification(BaseModel):
    order_id: str = Field(alias="orderId")
    transaction_id: Optional[Any] = Field(default=None, alias="transactionId")

    class Config:
        populate_by_name = True

class PaymentVerified(BaseModel):
    success: bool = True
