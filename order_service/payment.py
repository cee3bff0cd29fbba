import asyncio
import enum
import logging
import os
import re
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# 결제 검증 설정
PAYMENT_VERIFICATION_DELAY_SECONDS = float(os.getenv("PAYMENT_VERIFICATION_DELAY_SECONDS", "2.0"))
PAYMENT_ACCEPTED_PREFIX = os.getenv("PAYMENT_ACCEPTED_PREFIX", "2026")

# UPI transaction ids are exactly 12 ASCII digits
TRANSACTION_ID_PATTERN = re.compile(r"[0-9]{12}")

def is_valid_transaction_id(transaction_id) -> bool:
    return isinstance(transaction_id, str) and TRANSACTION_ID_PATTERN.fullmatch(transaction_id) is not None

class VerificationResult(str, enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class PaymentVerifier(ABC):
    """Confirms a payment transaction id with whatever backs the checkout."""

    rejection_message = "Transaction ID verification failed."

    @abstractmethod
    async def verify(self, transaction_id: str) -> VerificationResult:
        ...

class DemoPaymentVerifier(PaymentVerifier):
    """
    Stand-in for a bank / UPI gateway call.
    Waits a fixed delay, then accepts ids starting with a known prefix.
    """

    def __init__(self, delay_seconds: float = PAYMENT_VERIFICATION_DELAY_SECONDS, accepted_prefix: str = PAYMENT_ACCEPTED_PREFIX):
        self.delay_seconds = delay_seconds
        self.accepted_prefix = accepted_prefix

    @property
    def rejection_message(self) -> str:
        return f"Transaction ID verification failed. For demo purposes, use an ID starting with '{self.accepted_prefix}'."

    async def verify(self, transaction_id: str) -> VerificationResult:
        await asyncio.sleep(self.delay_seconds)  # 결제 게이트웨이 호출 시간 시뮬레이션
        if transaction_id.startswith(self.accepted_prefix):
            logger.info(f"Mock verification ACCEPTED transaction {transaction_id}.")
            return VerificationResult.ACCEPTED
        logger.warning(f"Mock verification REJECTED transaction {transaction_id}.")
        return VerificationResult.REJECTED
