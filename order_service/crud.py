import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import literal_column, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from order_service.database import Base
from order_service.errors import DuplicateOrderIdError, StoreError
from order_service.models import Order, OrderStatus

logger = logging.getLogger(__name__)

# PostgreSQL unique_violation SQLSTATE
UNIQUE_VIOLATION_SQLSTATE = "23505"

def _is_duplicate_key(error: IntegrityError) -> bool:
    orig = error.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig).lower()
    return "unique constraint failed" in message or "duplicate key" in message

class OrderStore:
    """Single-statement access to the orders table. One session per operation."""

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self):
        db: Session = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def list_orders(self) -> List[Order]:
        ordering = [Order.created_at.desc()]
        if self.engine.dialect.name == "sqlite":
            # 같은 created_at이면 나중에 삽입된 주문이 먼저
            ordering.append(literal_column("rowid").desc())
        try:
            with self.session() as db:
                return db.query(Order).order_by(*ordering).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch orders: {e}") from e

    def get_order(self, order_id: str) -> Optional[Order]:
        try:
            with self.session() as db:
                return db.query(Order).filter(Order.id == order_id).first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch order {order_id}: {e}") from e

    def create_order(self, order: Order) -> Order:
        try:
            with self.session() as db:
                db.add(order)
                db.commit()
                db.refresh(order)
                return order
        except IntegrityError as e:
            if _is_duplicate_key(e):
                raise DuplicateOrderIdError(f"Order {order.id} already exists: {e}") from e
            raise StoreError(f"Failed to create order {order.id}: {e}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create order {order.id}: {e}") from e

    def mark_paid(self, order_id: str, transaction_id: str) -> int:
        """
        Moves a pending order to paid in one conditional UPDATE.
        Returns the number of affected rows (0 when the order is missing or no longer pending).
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == OrderStatus.PENDING.value)
            .values(status=OrderStatus.PAID.value, transaction_id=transaction_id)
        )
        try:
            with self.session() as db:
                result = db.execute(stmt)
                db.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update order {order_id}: {e}") from e
