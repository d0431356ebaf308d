class StoreError(Exception):
    """Raised when the database (or the API in front of it) rejects or fails a read or write."""


class FormValidationError(Exception):
    """Raised when submitted fields fail validation; nothing was written."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = field_errors
        super().__init__(", ".join(f"{path}: {message}" for path, message in field_errors.items()))
