"""
XMLProjector

Creates projections: for each contract a concrete subclass is generated once whose
intercepted methods all forward to the dispatcher.
"""

import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union

from lxml import etree

from .annotations import DOC_URL_ATTR
from .config import ProjectorConfig, get_default_config
from .contract import ContractModel, Operation, OperationKind
from .dispatcher import Dispatcher
from .dom import new_document
from .errors import ArgumentShapeError, ConfigurationError
from .mixins import MixinRegistry
from .projection import Projection, is_contract

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Projection)


class XMLProjector:
    """
    Projection factory

    Each projector owns its configuration, mixin registry and dispatch tables, so two
    projectors never influence each other.
    """

    def __init__(self, config: Optional[ProjectorConfig] = None):
        self._config = config or get_default_config()
        self._mixins = MixinRegistry()
        self._models: Dict[type, ContractModel] = {}
        self._classes: Dict[type, type] = {}
        self._lock = threading.Lock()
        self.dispatcher = Dispatcher(self)

    @property
    def config(self) -> ProjectorConfig:
        return self._config

    @property
    def mixins(self) -> MixinRegistry:
        return self._mixins

    def project(self, node: Any, contract: Type[T]) -> T:
        """
        Bind contract to node

        The node is shared, not copied: changes through the projection are changes of
        the tree node belongs to.

        Raises:
            ConfigurationError: contract is not a Projection subclass
            ArgumentShapeError: node is neither a document nor an element
        """
        if not isinstance(node, (etree._ElementTree, etree._Element)):
            raise ArgumentShapeError(
                f"Cannot project {contract!r} onto {node!r}, expected an lxml document or element"
            )
        cls = self._projection_class(contract)
        projection = object.__new__(cls)
        projection._xmlproj_projector = self
        projection._xmlproj_node = node
        projection._xmlproj_contract = contract
        projection._xmlproj_mixins = {}
        return projection

    def create(self, contract: Type[T]) -> T:
        """Project contract onto a new empty document"""
        return self.project(new_document(), contract)

    def parse(self, text: Union[str, bytes], contract: Type[T]) -> T:
        """Parse XML text and project contract onto the document"""
        if isinstance(text, str):
            text = text.encode("utf-8")
        root = etree.fromstring(text, self._config.make_parser())
        return self.project(root.getroottree(), contract)

    def load(self, uri: str, contract: Type[T]) -> T:
        """Load a document through the configured loader and project contract onto it"""
        document = self._config.document_loader.load(uri, contract, parser=self._config.make_parser())
        return self.project(document, contract)

    def load_for(self, contract: Type[T]) -> T:
        """
        Load the document named by the contract's class level doc_url()

        Raises:
            ConfigurationError: The contract declares no document source
        """
        uri = vars(contract).get(DOC_URL_ATTR)
        if uri is None:
            raise ConfigurationError(
                f"{contract.__name__} declares no document source, decorate it with @doc_url(...)",
                {"contract": contract.__name__},
            )
        return self.load(uri, contract)

    def to_string(self, projection: Projection) -> str:
        return self._config.transformer().transform(projection.xml_node())

    def model_for(self, contract: type) -> ContractModel:
        """The dispatch table of contract, built on first use"""
        model = self._models.get(contract)
        if model is None:
            self._projection_class(contract)
            model = self._models[contract]
        return model

    def _projection_class(self, contract: type) -> type:
        cls = self._classes.get(contract)
        if cls is not None:
            return cls
        if not is_contract(contract):
            raise ConfigurationError(
                f"{contract!r} is not a contract, contracts derive from Projection",
                {"contract": repr(contract)},
            )
        with self._lock:
            cls = self._classes.get(contract)
            if cls is None:
                model = ContractModel(contract, self._config.type_converter)
                namespace: Dict[str, Any] = {"__module__": contract.__module__}
                for name, operation in model.operations.items():
                    namespace[name] = _forwarder(operation)
                cls = type(contract)(f"{contract.__name__}Projection", (contract,), namespace)
                self._models[contract] = model
                self._classes[contract] = cls
                logger.debug("Generated projection class for %s", contract.__name__)
        return cls


def _forwarder(operation: Operation) -> Callable[..., Any]:
    if operation.kind is OperationKind.OBJECT:

        def method(self: Projection, *args: Any) -> Any:
            return self._xmlproj_projector.dispatcher.invoke(self, operation, args)

        method.__name__ = operation.name
        return method

    def method(self: Projection, *args: Any, **kwargs: Any) -> Any:
        return self._xmlproj_projector.dispatcher.invoke(self, operation, operation.bind(args, kwargs))

    functools.update_wrapper(method, operation.function, updated=())
    return method
