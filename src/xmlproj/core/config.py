"""
Projector configuration

One ProjectorConfig is held by each XMLProjector and reached by every projection the
projector creates, so differently configured projectors never share state.
"""

from typing import Any, Dict

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

from .loader import DocumentLoader
from .types import TypeConverter


class SerializerOptions(BaseModel):
    """Options for turning nodes into text"""

    model_config = ConfigDict(frozen=True)

    pretty_print: bool = True
    method: str = "xml"
    xml_declaration: bool = False


class XmlTransformer:
    """Serializes documents and elements to text"""

    def __init__(self, options: SerializerOptions):
        self.options = options

    def transform(self, node: Any) -> str:
        if isinstance(node, etree._ElementTree) and node.getroot() is None:
            return ""
        if self.options.xml_declaration:
            data = etree.tostring(
                node,
                encoding="UTF-8",
                xml_declaration=True,
                pretty_print=self.options.pretty_print,
                method=self.options.method,
                with_tail=False,
            )
            return data.decode("utf-8")
        return etree.tostring(
            node,
            encoding="unicode",
            pretty_print=self.options.pretty_print,
            method=self.options.method,
            with_tail=False,
        )


class ProjectorConfig(BaseModel):
    """
    Projector configuration

    Attributes:
        type_converter: Scalar types readable from and writable to the tree
        serializer: Options used when a projection is converted to text
        document_loader: Collaborator for doc_url() operations and load()
        namespaces: Prefixes available in paths, on top of the document root's own
        remove_blank_text: Drop ignorable whitespace when parsing
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type_converter: TypeConverter = Field(default_factory=TypeConverter)
    serializer: SerializerOptions = Field(default_factory=SerializerOptions)
    document_loader: DocumentLoader = Field(default_factory=DocumentLoader)
    namespaces: Dict[str, str] = Field(default_factory=dict)
    remove_blank_text: bool = False

    def transformer(self) -> XmlTransformer:
        return XmlTransformer(self.serializer)

    def make_parser(self) -> etree.XMLParser:
        return etree.XMLParser(remove_blank_text=self.remove_blank_text)


def get_default_config() -> ProjectorConfig:
    """Get default projector configuration"""
    return ProjectorConfig()
