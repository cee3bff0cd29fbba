"""
Order service error taxonomy.
Each error carries the HTTP status the API layer answers with.
"""

class OrderServiceError(Exception):
    status_code = 500

class ValidationError(OrderServiceError):
    status_code = 400

class NotFoundError(OrderServiceError):
    status_code = 404

class ConflictError(OrderServiceError):
    status_code = 409

class StoreError(OrderServiceError):
    status_code = 500

class DuplicateOrderIdError(StoreError):
    pass

class MailError(OrderServiceError):
    """Raised when an email cannot be delivered. Never surfaced to clients."""
