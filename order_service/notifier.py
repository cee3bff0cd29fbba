import asyncio
import enum
import html
import logging
import os
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from order_service.errors import MailError

logger = logging.getLogger(__name__)

# 메일 설정 (Gmail 앱 비밀번호 사용)
GMAIL_USER = os.getenv("GMAIL_USER")
GMAIL_APP_PASSWORD = os.getenv("GMAIL_APP_PASSWORD")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", 465))
SMTP_TIMEOUT_SECONDS = 10

STORE_NAME = "eKart Electronics"
SENDER_NAME = "eKart Support"

class EmailOutcome(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"

def format_total(total: int) -> str:
    return f"₹{total:,}"

def render_order_email(order, outcome: EmailOutcome):
    """Returns (subject, html) for an order outcome email."""
    order_id = html.escape(order.id)
    customer_name = html.escape(order.customer_name)

    if outcome == EmailOutcome.SUCCESS:
        subject = f"Order Confirmed - {order.id}"
        message = "<p>Thank you for your order! Your payment was successful and we're processing your items.</p>"
        status_label = "Paid"
    else:
        subject = f"Order Payment Failed - {order.id}"
        message = (
            f"<p>We're sorry, but your payment verification for order <strong>{order_id}</strong> failed. "
            "Please try again or contact support.</p>"
        )
        status_label = "Failed"

    body = f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #eee; border-radius: 10px;">
      <h2 style="color: #111;">{STORE_NAME}</h2>
      <p>Hi {customer_name},</p>
      {message}
      <div style="background: #f9f9f9; padding: 15px; border-radius: 5px; margin: 20px 0;">
        <p><strong>Order ID:</strong> {order_id}</p>
        <p><strong>Total Amount:</strong> {format_total(order.total)}</p>
        <p><strong>Status:</strong> {status_label}</p>
      </div>
      <p>If you have any questions, reply to this email or contact us on WhatsApp.</p>
      <hr style="border: 0; border-top: 1px solid #eee; margin: 20px 0;" />
      <p style="font-size: 12px; color: #888;">&copy; 2026 {STORE_NAME}. All rights reserved.</p>
    </div>
    """
    return subject, body

class Notifier:
    """Best-effort order emails. Never raises into the request path."""

    def __init__(self, user=GMAIL_USER, password=GMAIL_APP_PASSWORD, host=SMTP_HOST, port=SMTP_PORT):
        self.user = user
        self.password = password
        self.host = host
        self.port = port

    @property
    def is_configured(self) -> bool:
        return bool(self.user and self.password)

    def build_message(self, order, outcome: EmailOutcome) -> EmailMessage:
        subject, body = render_order_email(order, outcome)
        message = EmailMessage()
        message["From"] = formataddr((SENDER_NAME, self.user))
        message["To"] = order.email
        message["Subject"] = subject
        message.set_content(f"{subject}\nTotal Amount: {format_total(order.total)}")
        message.add_alternative(body, subtype="html")
        return message

    async def send_order_email(self, order, outcome: EmailOutcome) -> bool:
        if not self.is_configured:
            logger.warning("Gmail credentials not configured. Skipping email.")
            return False

        try:
            message = self.build_message(order, outcome)
            # smtplib은 블로킹 호출이므로 스레드에서 실행
            await asyncio.to_thread(self.deliver, message)
        except Exception as e:
            logger.error(f"Error sending {outcome.value} email for order {order.id}: {e}")
            return False

        logger.info(f"Email sent to {order.email} for order {order.id}")
        return True

    def deliver(self, message: EmailMessage):
        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                server.login(self.user, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailError(f"SMTP delivery to {message['To']} failed: {e}") from e
