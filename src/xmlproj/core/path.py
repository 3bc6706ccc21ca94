"""
Path Resolver

Compiles path templates against call arguments and evaluates them with lxml XPath:
- {0}, {1}, ... are replaced by the positional call arguments
- results come back as text, as a node-set or as a single node
- setter paths are restricted to /name/name[/@attr | /*]
"""

import logging
import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lxml import etree

from .errors import ConfigurationError
from .types import to_text

logger = logging.getLogger(__name__)


class EvaluationKind(str, Enum):
    """What a caller expects back from an evaluation"""

    STRING = "string"
    NODESET = "nodeset"
    NODE = "node"


class PathResolver:
    """
    Path Resolver

    Setter grammar:
    - /a/b       -> element path
    - /a/b/@x    -> attribute on an element path
    - /*         -> the document root element
    """

    PLACEHOLDER_PATTERN = re.compile(r"\{(?P<index>\d+)\}")

    SETTER_PATTERN = re.compile(
        r"^(?:/[A-Za-z_][\w.\-]*)*"  # /element
        r"(?:/@(?:[A-Za-z_][\w.\-]*:)?[A-Za-z_][\w.\-]*"  # /@attribute or /@p:attribute
        r"|/\*)?$"  # or the root wildcard
    )

    ROOT_WILDCARD = "/*"

    @classmethod
    def substitute(cls, template: str, args: Sequence[Any]) -> str:
        """
        Replace positional placeholders with the text form of the arguments

        Raises:
            ConfigurationError: A placeholder refers to a missing argument
        """

        def replace(match: "re.Match[str]") -> str:
            index = int(match.group("index"))
            if index >= len(args):
                raise ConfigurationError(
                    f"Placeholder {{{index}}} in '{template}' has no matching argument",
                    {"template": template, "index": index, "argc": len(args)},
                )
            return to_text(args[index])

        return cls.PLACEHOLDER_PATTERN.sub(replace, template)

    @classmethod
    def is_legal_setter_path(cls, path: str) -> bool:
        return cls.SETTER_PATTERN.match(path) is not None

    @classmethod
    def split_attribute(cls, path: str) -> Tuple[str, Optional[str]]:
        """
        Split a setter path into element path and attribute name

        Returns:
            (element path, attribute name or None)
        """
        if "/@" not in path:
            return path, None
        element_path, attribute = path.split("/@", 1)
        return element_path, attribute

    @classmethod
    def namespaces_for(
        cls, context: Any, extra: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Prefix map of the context's document root merged with configured prefixes"""
        namespaces: Dict[str, str] = {}
        root = context.getroot() if isinstance(context, etree._ElementTree) else context
        if root is not None:
            for prefix, uri in root.nsmap.items():
                if prefix:
                    namespaces[prefix] = uri
        if extra:
            namespaces.update(extra)
        return namespaces

    @classmethod
    def evaluate(
        cls,
        path: str,
        context: Any,
        kind: EvaluationKind,
        namespaces: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Evaluate a substituted path against a context node

        The expression is compiled on every call. A document without a root element
        evaluates to nothing.

        Args:
            path: Path expression, placeholders already substituted
            context: Document (_ElementTree) or element
            kind: Requested result form
            namespaces: Prefix map used for evaluation

        Returns:
            str for STRING, list for NODESET, a node or None for NODE
        """
        logger.debug("Evaluating '%s' as %s", path, kind.value)
        if isinstance(context, etree._ElementTree) and context.getroot() is None:
            result: Any = []
        else:
            expression = etree.XPath(path, namespaces=namespaces or {})
            result = expression(context)

        if kind is EvaluationKind.STRING:
            return cls.string_value(result)

        if not isinstance(result, list):
            raise ConfigurationError(
                f"Path '{path}' does not select nodes, it evaluates to {result!r}",
                {"path": path},
            )
        if kind is EvaluationKind.NODESET:
            return result
        return result[0] if result else None

    @classmethod
    def string_value(cls, result: Any) -> str:
        """XPath string() of an evaluation result"""
        if isinstance(result, list):
            if not result:
                return ""
            return text_content(result[0])
        if isinstance(result, bool):
            return "true" if result else "false"
        if isinstance(result, float):
            if math.isnan(result):
                return "NaN"
            if math.isinf(result):
                return "Infinity" if result > 0 else "-Infinity"
            if result.is_integer():
                return str(int(result))
            return repr(result)
        return str(result)


def text_content(node: Any) -> str:
    """
    Text content of a node

    Elements and documents yield the concatenated descendant text, attribute and text
    selections yield themselves.
    """
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
        if node is None:
            return ""
    if isinstance(node, etree._Element):
        if not isinstance(node.tag, str):
            # comments and processing instructions
            return node.text or ""
        return etree.tostring(node, method="text", encoding="unicode", with_tail=False)
    return str(node)


def node_name(node: Any) -> str:
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    return node.tag


def node_list(nodes: List[Any]) -> str:
    """Short description of a node-set for log records"""
    return ", ".join(str(getattr(n, "tag", n)) for n in nodes)
