"""Custom exceptions for the binding pipeline."""


class BindingError(Exception):
    """Base exception for binding pipeline errors."""
    pass


class TableError(BindingError):
    """Error with an uploaded table."""
    pass


class ParseError(TableError):
    """Table text is malformed and cannot be parsed."""
    pass


class FileTooLargeError(TableError):
    """Uploaded file exceeds the configured size limit."""
    pass


class WrongFileTypeError(TableError):
    """Uploaded file has an unsupported extension."""
    pass


class ColumnNotFoundError(BindingError):
    """Selected column does not exist in the loaded table."""
    pass


class ClassificationError(BindingError):
    """Error during value classification."""
    pass


class InvalidBucketCountError(ClassificationError):
    """Bucket count is below one."""
    pass


class InvalidBreaksError(ClassificationError):
    """Manual break points are missing, mis-sized or decreasing."""
    pass


class UnknownMethodError(ClassificationError):
    """Classification method id is not recognised."""
    pass


class ColorSchemeError(BindingError):
    """Error with a color scheme."""
    pass


class UnknownSchemeError(ColorSchemeError):
    """Color scheme id is not recognised."""
    pass


class InvalidColorError(ColorSchemeError):
    """Color string cannot be parsed, or a scheme is malformed."""
    pass
