"""Application error types."""


class HungryOwlError(Exception):
    """Base error for application failures."""


class NotFoundError(HungryOwlError):
    """Raised when a record is missing or owned by another user."""


class InvalidQuantityError(HungryOwlError):
    """Raised for quantities that are not positive and finite."""


class RecipeGenerationError(HungryOwlError):
    """Raised when the recipe model fails or returns unusable output."""


class InventoryConflictError(HungryOwlError):
    """Raised when an inventory write loses a race with another writer."""
