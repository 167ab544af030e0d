"""Workflow exception types."""


class ValidationError(Exception):
    """Raised when submitted values fail a field-level check."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidTransitionError(Exception):
    """Raised when a status or state change is not allowed."""

    def __init__(self, entity_id: str, from_status, to_status):
        self.entity_id = entity_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition for {entity_id}: "
            f"{from_status.value} → {to_status.value}"
        )


class OpenItemsError(InvalidTransitionError):
    """Raised when an epic cannot close because child items are still open."""

    def __init__(self, epic_id: str, from_status, to_status, open_item_ids: list[str]):
        self.entity_id = epic_id
        self.from_status = from_status
        self.to_status = to_status
        self.open_item_ids = open_item_ids
        Exception.__init__(
            self,
            f"Epic {epic_id} cannot move to {to_status.value}: "
            f"{len(open_item_ids)} open item(s): {', '.join(open_item_ids)}",
        )


class MissingActorError(Exception):
    """Raised when an operation needs a user or board that is not present."""

    def __init__(self, what: str):
        self.what = what
        super().__init__(f"Cannot proceed without {what}")
