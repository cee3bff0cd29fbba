import asyncio
import logging
import random
import weakref
from typing import List, Optional

from order_service import models, schemas
from order_service.catalog import Catalog
from order_service.crud import OrderStore
from order_service.errors import ConflictError, DuplicateOrderIdError, NotFoundError, StoreError, ValidationError
from order_service.notifier import EmailOutcome, Notifier
from order_service.payment import PaymentVerifier, VerificationResult, is_valid_transaction_id

logger = logging.getLogger(__name__)

ORDER_ID_MAX_ATTEMPTS = 5

def generate_order_id() -> str:
    return f"EK-{random.randrange(1000000)}"

class OrderService:
    """
    Order lifecycle: pricing a cart into a pending order, then verifying its payment.

    States:
        pending -> paid     (verifier accepted the transaction id)
        pending -> pending  (rejected; the customer may retry)
    """

    def __init__(self, store: OrderStore, catalog: Catalog, verifier: PaymentVerifier, notifier: Notifier, id_factory=generate_order_id):
        self.store = store
        self.catalog = catalog
        self.verifier = verifier
        self.notifier = notifier
        self.id_factory = id_factory
        self._locks = weakref.WeakValueDictionary()

    def list_orders(self) -> List[models.Order]:
        return self.store.list_orders()

    def get_order(self, order_id: str) -> models.Order:
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def create_order(self, order_in: schemas.OrderCreate) -> models.Order:
        total = self.catalog.price_items(order_in.items)
        customer = order_in.customer

        for attempt in range(1, ORDER_ID_MAX_ATTEMPTS + 1):
            db_order = models.Order(
                id=self.id_factory(),
                customer_name=f"{customer.first_name} {customer.last_name}",
                email=customer.email,
                address=customer.address,
                total=total,
                status=models.OrderStatus.PENDING.value,
            )
            try:
                created = self.store.create_order(db_order)
            except DuplicateOrderIdError as e:
                logger.warning(f"Order id collision on attempt {attempt}/{ORDER_ID_MAX_ATTEMPTS}: {e}")
                continue
            logger.info(f"Order {created.id} created with pending status, total {total}.")
            return created

        raise StoreError(f"Could not allocate a unique order id after {ORDER_ID_MAX_ATTEMPTS} attempts.")

    def _lock_for(self, order_id: str) -> asyncio.Lock:
        lock = self._locks.get(order_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[order_id] = lock
        return lock

    async def verify_payment(self, order_id: str, transaction_id: Optional[str]) -> models.Order:
        if not is_valid_transaction_id(transaction_id):
            raise ValidationError("Invalid Transaction ID. Must be 12 digits.")

        result = await self.verifier.verify(transaction_id)

        # 같은 주문에 대한 동시 검증 요청은 순차 처리
        lock = self._lock_for(order_id)
        async with lock:
            order = self.store.get_order(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            if order.status == models.OrderStatus.PAID.value:
                raise ConflictError(f"Order {order_id} is already paid.")

            if result == VerificationResult.ACCEPTED:
                if self.store.mark_paid(order_id, transaction_id) == 0:
                    raise NotFoundError("Order not found")
                order.status = models.OrderStatus.PAID.value
                order.transaction_id = transaction_id

        if result != VerificationResult.ACCEPTED:
            logger.warning(f"Payment verification failed for order {order_id}; order stays pending.")
            await self.notifier.send_order_email(order, EmailOutcome.FAILED)
            raise ValidationError(self.verifier.rejection_message)

        logger.info(f"Order {order_id} marked as paid with transaction {transaction_id}.")
        await self.notifier.send_order_email(order, EmailOutcome.SUCCESS)
        return order
