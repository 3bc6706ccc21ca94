"""xmlproj projection core"""

from .errors import (
    XmlProjError,
    ConfigurationError,
    ConversionError,
    ArgumentShapeError,
    DocumentLoadError,
)
from .types import TypeConverter, Conversion, to_text
from .path import PathResolver, EvaluationKind, text_content
from .dom import ensure_element_exists, set_document_element, remove_node
from .annotations import (
    OperationDescriptor,
    OperationRole,
    Value,
    read,
    write,
    delete,
    doc_url,
)
from .projection import Projection
from .contract import ContractModel, Operation, OperationKind, ResultKind
from .mixins import MixinRegistry
from .loader import DocumentLoader
from .config import ProjectorConfig, SerializerOptions, XmlTransformer, get_default_config
from .dispatcher import Dispatcher
from .projector import XMLProjector

__all__ = [
    # Errors
    "XmlProjError",
    "ConfigurationError",
    "ConversionError",
    "ArgumentShapeError",
    "DocumentLoadError",
    # Types
    "TypeConverter",
    "Conversion",
    "to_text",
    # Path
    "PathResolver",
    "EvaluationKind",
    "text_content",
    # Tree
    "ensure_element_exists",
    "set_document_element",
    "remove_node",
    # Declarations
    "OperationDescriptor",
    "OperationRole",
    "Value",
    "read",
    "write",
    "delete",
    "doc_url",
    # Projection
    "Projection",
    "ContractModel",
    "Operation",
    "OperationKind",
    "ResultKind",
    "MixinRegistry",
    "DocumentLoader",
    "ProjectorConfig",
    "SerializerOptions",
    "XmlTransformer",
    "get_default_config",
    "Dispatcher",
    "XMLProjector",
]
