class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class MissingQueryError(DomainError):
    """Raised when a vendor search arrives without a query."""

    pass


class DocumentValidationError(DomainError):
    """Base class for rejected contract uploads."""

    pass


class UnsupportedDocumentError(DocumentValidationError):
    """The uploaded file is neither a PDF nor plain text."""

    pass


class EmptyDocumentError(DocumentValidationError):
    """The upload (or the text extracted from it) is empty."""

    pass


class DocumentParseError(DocumentValidationError):
    """The upload claimed to be a PDF but could not be read."""

    pass
