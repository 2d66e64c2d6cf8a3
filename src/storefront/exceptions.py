"""Storefront error taxonomy.

Every error carries a stable ``kind`` and the HTTP status class it surfaces
as, so the API layer can render it without knowing the individual types.
Malformed input is reported through Protean's ``ValidationError`` instead.
"""


class StorefrontError(Exception):
    """Base class for errors raised by storefront operations."""

    kind = "server_error"
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message, "details": self.details}


class NotFound(StorefrontError):
    kind = "not_found"
    status_code = 404

    def __init__(self, entity: str, identifier):
        super().__init__(
            f"{entity} not found",
            entity=entity,
            identifier=str(identifier),
        )


class InvalidState(StorefrontError):
    """A transition was attempted from a state that does not permit it."""

    kind = "invalid_state"
    status_code = 400

    def __init__(self, message: str, current_state: str | None = None, **details):
        super().__init__(message, current_state=current_state, **details)
        self.current_state = current_state


class NoInventory(StorefrontError):
    kind = "no_inventory"
    status_code = 404

    def __init__(self, message: str = "No wands are available for allocation"):
        super().__init__(message)


class SelectionFailed(StorefrontError):
    """The wand at the computed offset vanished between count and fetch."""

    kind = "selection_failed"
    status_code = 409
    retryable = True


class AllocationConflict(StorefrontError):
    """Another order claimed the wand first."""

    kind = "allocation_conflict"
    status_code = 409
    retryable = True


class DuplicateOrder(StorefrontError):
    kind = "duplicate_order"
    status_code = 409


class ContentRejected(StorefrontError):
    kind = "content_rejected"
    status_code = 422


class ExternalServiceError(StorefrontError):
    kind = "external_service_error"
    status_code = 503
