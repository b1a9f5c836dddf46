"""Exceptions raised by StampForge domain services."""


class StampForgeError(RuntimeError):
    """Base class for domain exceptions."""


class NotFoundError(StampForgeError):
    """Raised when a card design or a target member cannot be found."""


class ValidationError(StampForgeError):
    """Raised when request parameters are rejected before any mutation."""


class PermissionDenied(StampForgeError):
    """Raised when the actor fails the capability gate for a managed action."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Actor is not allowed to perform '{action}'")
        self.action = action


class InvalidCardError(StampForgeError):
    """Raised when a stored selection points at a card missing from the catalog."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Stored card '{card_id}' is not in the catalog")
        self.card_id = card_id


class StorageError(StampForgeError):
    """Raised when the persistence layer fails."""


class RenderError(StampForgeError):
    """Raised when card assets cannot be loaded or composited."""
