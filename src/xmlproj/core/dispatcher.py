"""
Dispatcher

Routes every call on a projection. Operations were classified when the contract's
dispatch table was built; per call only the mixin lookup is left:

1. Projection self-metadata     -> node and contract, no tree access
2. object methods               -> serialization, equality, hash
3. registered mixin             -> delegate
4. @delete                      -> remove matched nodes
5. void without parameters      -> ConfigurationError
6. void, or set_* with params   -> write
7. everything else              -> read
"""

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from lxml import etree

from . import dom
from .annotations import OperationRole
from .contract import Operation, OperationKind, ResultKind
from .errors import ArgumentShapeError, ConfigurationError, ConversionError
from .path import EvaluationKind, PathResolver, node_list, node_name, text_content
from .projection import Projection
from .types import to_text

if TYPE_CHECKING:
    from .projector import XMLProjector

logger = logging.getLogger(__name__)

COLLECTION_TYPES = (list, tuple, set, frozenset)


class Dispatcher:
    """
    Translates projection calls into reads, writes and deletes on the bound tree

    Holds no per-call state; the projector supplies configuration and creates
    sub-projections.
    """

    def __init__(self, projector: "XMLProjector"):
        self.projector = projector

    def invoke(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        kind = operation.kind
        if kind is OperationKind.SELF:
            return self._invoke_self(projection, operation)
        if kind is OperationKind.OBJECT:
            return self._invoke_object(projection, operation, args)

        contract = projection.projection_contract()
        factory = self.projector.mixins.get_mixin_factory(contract, operation.declaring)
        if factory is not None:
            return self._invoke_mixin(projection, operation, factory, args)

        logger.debug("Dispatching %s as %s", operation.describe(), kind.value)
        if kind is OperationKind.DELETE:
            return self._invoke_deleter(projection, operation, args)
        if kind is OperationKind.AMBIGUOUS:
            raise ConfigurationError(
                f"Invoking {operation.describe()} which returns nothing and takes no "
                f"parameters. There is nothing to read or write.",
                {"operation": operation.describe()},
            )
        if kind is OperationKind.WRITE:
            return self._invoke_setter(projection, operation, args)
        return self._invoke_getter(projection, operation, args)

    def _invoke_self(self, projection: Projection, operation: Operation) -> Any:
        if operation.name == "xml_node":
            return projection._xmlproj_node
        return projection._xmlproj_contract

    def _invoke_object(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        node = projection._xmlproj_node
        contract = projection._xmlproj_contract
        if operation.name == "__str__":
            return self.projector.config.transformer().transform(node)
        if operation.name == "__eq__":
            other = args[0]
            if not isinstance(other, Projection):
                return False
            if contract is not other.projection_contract():
                return False
            return self._identity(projection) is self._identity(other)
        if operation.name == "__hash__":
            return 31 * hash(contract) + 27 * hash(self._identity(projection))
        if dom.bound_element(node) is None:
            return f"<{contract.__name__} projection of an empty document>"
        return f"<{contract.__name__} projection of <{node_name(node)}>>"

    def _identity(self, projection: Projection) -> Any:
        """
        The node a projection stands for, independent of the document wrapper

        Every getroottree() call returns a new _ElementTree, so documents are identified
        by their root element. Only a document without root is identified by itself.
        """
        node = projection.xml_node()
        if not isinstance(node, etree._ElementTree):
            return node
        root = node.getroot()
        if root is None:
            return node
        # holding the proxy keeps its identity, and so the hash, stable
        projection._xmlproj_root = root
        return root

    def _invoke_mixin(self, projection: Projection, operation: Operation, factory: Any, args: Tuple[Any, ...]) -> Any:
        instances: Dict[type, Any] = projection._xmlproj_mixins
        instance = instances.get(operation.declaring)
        if instance is None:
            instance = factory(projection)
            instances[operation.declaring] = instance
        logger.debug("Delegating %s to mixin %s", operation.describe(), type(instance).__name__)
        return getattr(instance, operation.name)(*args)

    def _require_descriptor(self, operation: Operation, role: OperationRole) -> None:
        if operation.problem is not None:
            raise ConfigurationError(operation.problem, {"operation": operation.describe()})
        descriptor = operation.descriptor
        if descriptor is None or descriptor.role is not role:
            raise ConfigurationError(
                f"Method {operation.describe()} needs a @{role.value} declaration.",
                {"operation": operation.describe(), "role": role.value},
            )

    def _context_node(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        """The bound node, or the document named by the operation's doc_url"""
        uri = operation.descriptor.doc_url if operation.descriptor is not None else None
        if uri is None:
            return projection._xmlproj_node
        config = self.projector.config
        return config.document_loader.load(
            PathResolver.substitute(uri, args),
            projection._xmlproj_contract,
            parser=config.make_parser(),
        )

    def _namespaces(self, context: Any) -> Dict[str, str]:
        return PathResolver.namespaces_for(context, self.projector.config.namespaces)

    def _invoke_deleter(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        path = PathResolver.substitute(operation.descriptor.path, args)
        context = self._context_node(projection, operation, args)
        nodes = PathResolver.evaluate(path, context, EvaluationKind.NODESET, self._namespaces(context))
        logger.debug("Deleting %d node(s) selected by '%s': %s", len(nodes), path, node_list(nodes))
        for node in nodes:
            dom.remove_node(node)
        return self._write_result(projection, operation)

    def _invoke_setter(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        self._require_descriptor(operation, OperationRole.WRITE)
        path = PathResolver.substitute(operation.descriptor.path, args)
        if not PathResolver.is_legal_setter_path(path):
            raise ConfigurationError(
                f"Method {operation.describe()} was invoked as setter and did not have a "
                f'path to an element or attribute: "{path}"',
                {"operation": operation.describe(), "path": path},
            )
        element_path, attribute = PathResolver.split_attribute(path)
        context = self._context_node(projection, operation, args)
        document = dom.owner_document(context)
        value = args[operation.value_index]

        if element_path == PathResolver.ROOT_WILDCARD:
            if not isinstance(value, Projection):
                raise ArgumentShapeError(
                    f"Method {operation.describe()} was invoked as setter changing the "
                    f"document root element. Expected a projection but got {value!r}",
                    {"operation": operation.describe(), "path": path},
                )
            dom.set_document_element(document, self._value_element(value))
            return self._write_result(projection, operation)

        if element_path.endswith(PathResolver.ROOT_WILDCARD):
            raise ConfigurationError(
                f'Wildcard in "{path}" of {operation.describe()} is only supported as "/*" '
                f"for replacing the document root element",
                {"operation": operation.describe(), "path": path},
            )

        target = dom.ensure_element_exists(document, element_path)
        if target is None:
            raise ConfigurationError(
                f'Path "{path}" of {operation.describe()} names no element to write to',
                {"operation": operation.describe(), "path": path},
            )

        if attribute is not None:
            target.set(self._attribute_name(attribute, context, path), to_text(value))
        elif isinstance(value, Projection):
            self._apply_projection(target, value)
        elif isinstance(value, COLLECTION_TYPES):
            self._apply_collection(target, value)
        else:
            dom.set_text_content(target, to_text(value))
        return self._write_result(projection, operation)

    def _attribute_name(self, attribute: str, context: Any, path: str) -> str:
        if ":" not in attribute:
            return attribute
        prefix, local = attribute.split(":", 1)
        uri = self._namespaces(context).get(prefix)
        if uri is None:
            raise ConfigurationError(
                f'Unknown namespace prefix "{prefix}" in "{path}"', {"path": path, "prefix": prefix}
            )
        return f"{{{uri}}}{local}"

    def _value_element(self, value: Projection) -> etree._Element:
        element = dom.bound_element(value.xml_node())
        if element is None:
            raise ArgumentShapeError(f"Cannot write {value!r}, its document has no element")
        return element

    def _apply_projection(self, target: etree._Element, value: Projection) -> None:
        element = self._value_element(value)
        dom.remove_children_by_name(target, element.tag)
        target.append(element)

    def _apply_collection(self, target: etree._Element, values: Any) -> None:
        elements: List[etree._Element] = []
        for value in values:
            if not isinstance(value, Projection):
                raise ArgumentShapeError(
                    f"Setter argument collection contains an object of type "
                    f"{type(value).__name__}. A collection written to a projection may only "
                    f"contain projections.",
                    {"type": type(value).__name__},
                )
            elements.append(self._value_element(value))
        for name in dict.fromkeys(element.tag for element in elements):
            dom.remove_children_by_name(target, name)
        for element in elements:
            target.append(element)

    def _write_result(self, projection: Projection, operation: Operation) -> Any:
        """Return convention shared by writes and deletes"""
        if not operation.has_return:
            return None
        if operation.return_type is operation.declaring:
            return projection
        if operation.problem is not None:
            raise ConfigurationError(operation.problem, {"operation": operation.describe()})
        raise ConfigurationError(
            f'Method {operation.describe()} has illegal return type "{operation.return_type}". '
            f"Expected None or {operation.declaring.__name__}.",
            {"operation": operation.describe()},
        )

    def _invoke_getter(self, projection: Projection, operation: Operation, args: Tuple[Any, ...]) -> Any:
        self._require_descriptor(operation, OperationRole.READ)
        path = PathResolver.substitute(operation.descriptor.path, args)
        context = self._context_node(projection, operation, args)
        namespaces = self._namespaces(context)
        result = operation.result

        if result is ResultKind.SCALAR:
            data = PathResolver.evaluate(path, context, EvaluationKind.STRING, namespaces)
            return self._convert(operation.target, data, path)

        if result in (ResultKind.LIST, ResultKind.TUPLE):
            nodes = PathResolver.evaluate(path, context, EvaluationKind.NODESET, namespaces)
            items = self._map_nodes(operation, nodes, path)
            return tuple(items) if result is ResultKind.TUPLE else items

        if result is ResultKind.PROJECTION:
            node = PathResolver.evaluate(path, context, EvaluationKind.NODE, namespaces)
            if node is None:
                return None
            if not isinstance(node, (etree._Element, etree._ElementTree)):
                raise ConfigurationError(
                    f'Path "{path}" of {operation.describe()} selects {node!r}, not an element',
                    {"operation": operation.describe(), "path": path},
                )
            return self.projector.project(node, operation.target)

        raise ConfigurationError(
            f"Return type {operation.return_type} of {operation.describe()} is not supported. "
            f"Use a projection contract, a list, a tuple or one of the converter types: "
            f"{self.projector.config.type_converter!r}",
            {"operation": operation.describe()},
        )

    def _map_nodes(self, operation: Operation, nodes: List[Any], path: str) -> List[Any]:
        component = operation.component
        if component is None:
            raise ConfigurationError(
                f"When returning a list from {operation.describe()}, declare the element "
                f"type, e.g. List[str] or @read(path, component=str).",
                {"operation": operation.describe()},
            )
        if operation.component_result is ResultKind.SCALAR:
            return [self._convert(component, text_content(node), path) for node in nodes]
        if operation.component_result is ResultKind.PROJECTION:
            projections = []
            for node in nodes:
                if not isinstance(node, etree._Element):
                    raise ConfigurationError(
                        f'Path "{path}" of {operation.describe()} selects {node!r}, not an element',
                        {"operation": operation.describe(), "path": path},
                    )
                clone = copy.deepcopy(node)
                clone.tail = None
                projections.append(self.projector.project(clone, component))
            return projections
        raise ConfigurationError(
            f"Element type {component} is not valid for the result of {operation.describe()} "
            f"using the current type converter: {self.projector.config.type_converter!r}",
            {"operation": operation.describe()},
        )

    def _convert(self, target: type, data: str, path: str) -> Any:
        try:
            return self.projector.config.type_converter.convert_to(target, data)
        except (ValueError, ArithmeticError) as e:
            raise ConversionError(f"{e} Path was: {path}", {"path": path, "data": data}) from e
