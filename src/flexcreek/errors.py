"""Error types raised by the flexcreek persistence layer."""


class FlexCreekError(Exception):
    """Base class for all flexcreek errors."""


class ValidationError(FlexCreekError):
    """An entity is missing a required reference or has an invalid field."""


class NotFoundError(FlexCreekError):
    """A row targeted by id does not exist."""

    def __init__(self, entity: str, entity_id: int | str | None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StoreError(FlexCreekError):
    """Failure reported by the underlying store.

    Carries the operation name and the entity id where known, plus the
    store's own message. The SQL text is never included.
    """

    def __init__(self, operation: str, detail: str, entity_id: int | None = None):
        self.operation = operation
        self.detail = detail
        self.entity_id = entity_id
        target = f" (id={entity_id})" if entity_id is not None else ""
        super().__init__(f"{operation}{target} failed: {detail}")


class ConstraintViolation(StoreError):
    """Unique or foreign-key constraint rejected the write."""


class StoreUnavailable(StoreError):
    """Connection or transaction infrastructure failure. Safe to retry."""


class LogDecodeError(FlexCreekError):
    """A stored performance log could not be parsed for its movement type."""
