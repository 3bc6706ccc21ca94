"""
xmlproj exception definitions

Every failure raised by the projection core derives from XmlProjError. Errors raised by
lxml while parsing or serializing propagate unchanged.
"""

from typing import Any, Dict, Optional


class XmlProjError(Exception):
    """Base exception for xmlproj"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(XmlProjError):
    """
    Configuration error

    The declared shape of an operation is ambiguous or unsupported: a void operation
    without parameters, an unsupported return type, a missing descriptor, an illegal
    setter path or an illegal return type for a write or delete.
    """

    pass


class ConversionError(XmlProjError, ValueError):
    """
    Conversion error

    Text selected by a read could not be parsed into the declared scalar type. The
    offending path is part of the message and available as details["path"].
    """

    pass


class ArgumentShapeError(XmlProjError, TypeError):
    """
    Argument shape error

    The value passed to a write does not fit the resolved path, e.g. a plain value for
    a root replacement or a collection holding something other than projections.
    """

    pass


class DocumentLoadError(XmlProjError):
    """Raised by the default document loader for unsupported or missing sources"""

    pass
