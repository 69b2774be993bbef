"""Status document exception types."""


class StatusDocumentError(Exception):
    """Base class for status document failures."""


class DocumentParseError(StatusDocumentError):
    """Raised when a document is not valid YAML or has an unusable shape."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ItemNotFoundError(StatusDocumentError):
    """Raised when an identifier cannot be located in the document text."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class InvalidStatusValueError(StatusDocumentError, ValueError):
    """Raised when an identifier or status value would corrupt the document."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class MutationVerificationError(StatusDocumentError):
    """Raised when rewritten text does not read back the requested value."""

    def __init__(self, item_id: str, expected: str, actual):
        self.item_id = item_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Update of {item_id} did not take effect: "
            f"expected {expected!r}, read back {actual!r}"
        )
