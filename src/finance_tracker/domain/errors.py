"""Domain error types shared by the services and the HTTP layer."""


class DomainError(ValueError):
    """Base class for errors caused by the caller's input."""


class ValidationError(DomainError):
    """Input failed validation. ``errors`` lists every problem found."""

    def __init__(self, errors: list[str], message: str = "Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = list(errors)


class NotFoundError(DomainError):
    """Referenced record does not exist."""


class ConflictError(DomainError):
    """Write would break a uniqueness rule."""


class StoreError(RuntimeError):
    """The document store is unavailable or failed."""


def transaction_not_found(transaction_id: str) -> str:
    return f"Transaction {transaction_id} not found"


def budget_not_found(budget_id: str) -> str:
    return f"Budget {budget_id} not found"


def duplicate_budget(category: str, month: str, year: int) -> str:
    return f"Budget already exists for {category} in {month} {year}"
