"""
errors.py — Domain errors raised by the services.
The HTTP layer maps NotFoundError to 404 and ValidationError to 400.
"""


class BudgetlyError(Exception):
    """Base class for every error a service raises on purpose."""


class NotFoundError(BudgetlyError):
    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ValidationError(BudgetlyError):
    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
