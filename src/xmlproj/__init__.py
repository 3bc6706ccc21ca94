"""
xmlproj - project XML documents onto Python contracts

Declare a contract once and read, write and delete through it:

    class Person(Projection):
        @read("/person/name")
        def get_name(self) -> str: ...

    person = XMLProjector().parse("<person><name>Ada</name></person>", Person)
    person.get_name()
"""

__version__ = "0.1.0"

from .core import (
    # Errors
    XmlProjError,
    ConfigurationError,
    ConversionError,
    ArgumentShapeError,
    DocumentLoadError,
    # Declarations
    Projection,
    Value,
    read,
    write,
    delete,
    doc_url,
    # Runtime
    XMLProjector,
    ProjectorConfig,
    SerializerOptions,
    TypeConverter,
    DocumentLoader,
    MixinRegistry,
)

__all__ = [
    "__version__",
    # Errors
    "XmlProjError",
    "ConfigurationError",
    "ConversionError",
    "ArgumentShapeError",
    "DocumentLoadError",
    # Declarations
    "Projection",
    "Value",
    "read",
    "write",
    "delete",
    "doc_url",
    # Runtime
    "XMLProjector",
    "ProjectorConfig",
    "SerializerOptions",
    "TypeConverter",
    "DocumentLoader",
    "MixinRegistry",
]
