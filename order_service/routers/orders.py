import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List

from order_service import schemas
from order_service.errors import OrderServiceError, StoreError
from order_service.service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["orders"],
)

def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service

def _to_http_exception(e: OrderServiceError, fallback_detail: str) -> HTTPException:
    if isinstance(e, StoreError):
        logger.error(f"{fallback_detail}: {e}")
        return HTTPException(status_code=e.status_code, detail=fallback_detail)
    return HTTPException(status_code=e.status_code, detail=str(e))

# ===============================
# Catalog Endpoints
# ===============================

@router.get("/products", response_model=List[schemas.Product])
def read_products(service: OrderService = Depends(get_order_service)):
    return service.catalog.list_products()

# ===============================
# Order Endpoints
# ===============================

@router.get("/admin/orders", response_model=List[schemas.Order])
def read_orders(service: OrderService = Depends(get_order_service)):
    try:
        return service.list_orders()
    except OrderServiceError as e:
        raise _to_http_exception(e, "Failed to fetch orders")

@router.get("/orders/{order_id}", response_model=schemas.Order)
def read_order(order_id: str, service: OrderService = Depends(get_order_service)):
    try:
        return service.get_order(order_id)
    except OrderServiceError as e:
        raise _to_http_exception(e, "Failed to fetch order")

@router.post("/orders", response_model=schemas.OrderCreated)
def create_order(order: schemas.OrderCreate, service: OrderService = Depends(get_order_service)):
    try:
        db_order = service.create_order(order)
    except OrderServiceError as e:
        raise _to_http_exception(e, "Failed to create order")
    return schemas.OrderCreated(order_id=db_order.id, total=db_order.total)

# ===============================
# Payment Endpoints
# ===============================

@router.post("/verify-payment", response_model=schemas.PaymentVerified)
async def verify_payment(verification: schemas.PaymentVerification, service: OrderService = Depends(get_order_service)):
    """
    Checks the UPI transaction id for an order and marks it paid.
    예: {"orderId": "EK-123456", "transactionId": "202600000001"}
    """
    try:
        await service.verify_payment(verification.order_id, verification.transaction_id)
    except OrderServiceError as e:
        raise _to_http_exception(e, "Verification failed")
    return schemas.PaymentVerified(success=True)
