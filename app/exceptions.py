from typing import Dict, List


class ValidationFailed(Exception):
    """Exception raised when submitted fields break one or more rules.

    ``errors`` maps each failing field to its messages, in rule order.
    """

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("Validation failed")
        self.errors = errors


class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class BusinessRuleViolation(Exception):
    """Exception raised when an operation would break a product invariant."""
    pass


class DuplicateProductNameError(Exception):
    """Exception raised when the database rejects a product name as taken."""

    def __init__(self, product_name: str):
        super().__init__(f"Product name '{product_name}' is already in use")
        self.product_name = product_name
