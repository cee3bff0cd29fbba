import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime

from order_service.database import Base

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"

def _utcnow():
    # SQLite는 timezone 정보를 저장하지 않으므로 naive UTC로 기록
    return datetime.now(timezone.utc).replace(tzinfo=None)

class Order(Base):
    __tablename__ = "orders"
    id = Column(String, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(String, nullable=False)
    total = Column(Integer, nullable=False)
    status = Column(String, default=OrderStatus.PENDING.value, nullable=False)  # pending, paid
    transaction_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
