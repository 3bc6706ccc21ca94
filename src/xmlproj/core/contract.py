"""
Contract model

Inspects a contract class once and records, for every intercepted method, how the
dispatcher has to treat it. Nothing here touches a tree; problems with a declaration
are recorded and only raised when the operation is called.
"""

import inspect
import logging
import re
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .annotations import DESCRIPTOR_ATTR, DOC_URL_ATTR, OperationDescriptor, OperationRole, Value
from .projection import Projection, is_contract
from .types import TypeConverter

logger = logging.getLogger(__name__)

OBJECT_OPERATIONS = ("__str__", "__repr__", "__eq__", "__hash__")

SETTER_NAME_PATTERN = re.compile(r"^set(?:_|[A-Z])")

_NONE_TYPE = type(None)
_MISSING = object()


class OperationKind(str, Enum):
    """Dispatch classification of an operation"""

    SELF = "self"
    OBJECT = "object"
    DELETE = "delete"
    AMBIGUOUS = "ambiguous"
    WRITE = "write"
    READ = "read"


class ResultKind(str, Enum):
    """How a getter result (or a list element) is produced"""

    SCALAR = "scalar"
    LIST = "list"
    TUPLE = "tuple"
    PROJECTION = "projection"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Operation:
    """One entry of a contract's dispatch table"""

    name: str
    declaring: type
    kind: OperationKind
    function: Optional[Callable[..., Any]] = None
    descriptor: Optional[OperationDescriptor] = None
    signature: Optional[inspect.Signature] = None
    has_parameters: bool = False
    has_return: bool = False
    return_type: Any = None
    result: ResultKind = ResultKind.UNSUPPORTED
    target: Any = None
    component: Any = None
    component_result: ResultKind = ResultKind.UNSUPPORTED
    value_index: int = 0
    problem: Optional[str] = None

    def bind(self, args: Sequence[Any], kwargs: Dict[str, Any]) -> Tuple[Any, ...]:
        """
        Positional argument tuple for a call, keywords and defaults applied

        Raises:
            TypeError: The arguments do not fit the declared signature
        """
        if self.signature is None:
            if kwargs:
                raise TypeError(f"{self.name}() takes no keyword arguments")
            return tuple(args)
        bound = self.signature.bind(None, *args, **kwargs)
        bound.apply_defaults()
        positional: List[Any] = []
        for index, (name, value) in enumerate(bound.arguments.items()):
            if index == 0:
                continue
            kind = self.signature.parameters[name].kind
            if kind is inspect.Parameter.VAR_POSITIONAL:
                positional.extend(value)
            elif kind is not inspect.Parameter.VAR_KEYWORD:
                positional.append(value)
        return tuple(positional)

    def describe(self) -> str:
        return f"{self.declaring.__name__}.{self.name}"


@dataclass
class ContractModel:
    """
    Dispatch table of a contract

    Operations are the methods declared with read/write/delete, the abstract methods
    (mixin operations), the Projection self-metadata methods and the object methods
    the contract does not define itself.
    """

    contract: type
    converter: TypeConverter
    operations: Dict[str, Operation] = field(default_factory=dict)

    def __post_init__(self) -> None:
        seen = set()
        for cls in self.contract.__mro__:
            if cls is object:
                continue
            for name, attribute in vars(cls).items():
                if name in seen:
                    continue
                seen.add(name)
                if not inspect.isfunction(attribute):
                    continue
                if not _is_operation(cls, name, attribute):
                    continue
                self.operations[name] = self._operation(cls, name, attribute)

        for name in OBJECT_OPERATIONS:
            if name not in seen:
                self.operations[name] = Operation(name=name, declaring=object, kind=OperationKind.OBJECT)

        logger.debug(
            "Built dispatch table for %s: %s",
            self.contract.__name__,
            ", ".join(f"{name}={op.kind.value}" for name, op in self.operations.items()),
        )

    def _operation(self, cls: type, name: str, function: Callable[..., Any]) -> Operation:
        if cls is Projection:
            return Operation(name=name, declaring=cls, kind=OperationKind.SELF, function=function)

        descriptor: Optional[OperationDescriptor] = getattr(function, DESCRIPTOR_ATTR, None)
        uri = getattr(function, DOC_URL_ATTR, None)
        if descriptor is not None and uri is not None:
            descriptor = descriptor.model_copy(update={"doc_url": uri})

        signature = inspect.signature(function)
        parameters = list(signature.parameters.values())[1:]
        has_parameters = bool(parameters)

        problem = None
        try:
            localns = {cls.__name__: cls, self.contract.__name__: self.contract}
            localns.update(vars(cls))
            hints = typing.get_type_hints(function, localns=localns, include_extras=True)
        except NameError as e:
            hints = {}
            problem = f"Cannot resolve type hints of {cls.__name__}.{name}: {e}"

        if "return" in hints:
            return_type = hints["return"]
            has_return = return_type is not _NONE_TYPE
        else:
            raw = function.__annotations__.get("return", _MISSING)
            return_type = None
            has_return = raw not in (_MISSING, None, "None")

        if descriptor is not None and descriptor.role is OperationRole.DELETE:
            kind = OperationKind.DELETE
        elif not has_return and not has_parameters:
            kind = OperationKind.AMBIGUOUS
        elif not has_return or (SETTER_NAME_PATTERN.match(name) and has_parameters):
            kind = OperationKind.WRITE
        else:
            kind = OperationKind.READ

        result, target, component, component_result = ResultKind.UNSUPPORTED, None, None, ResultKind.UNSUPPORTED
        if kind is OperationKind.READ and problem is None:
            result, target, component, component_result = self._analyze_return(return_type, descriptor)

        return Operation(
            name=name,
            declaring=cls,
            kind=kind,
            function=function,
            descriptor=descriptor,
            signature=signature,
            has_parameters=has_parameters,
            has_return=has_return,
            return_type=return_type,
            result=result,
            target=target,
            component=component,
            component_result=component_result,
            value_index=_value_index(parameters, hints),
            problem=problem,
        )

    def _analyze_return(
        self, return_type: Any, descriptor: Optional[OperationDescriptor]
    ) -> Tuple[ResultKind, Any, Any, ResultKind]:
        target = _unwrap(return_type)
        if self.converter.is_convertible(target):
            return ResultKind.SCALAR, target, None, ResultKind.UNSUPPORTED
        if is_contract(target):
            return ResultKind.PROJECTION, target, None, ResultKind.UNSUPPORTED

        origin = typing.get_origin(target) or target
        if origin is list or origin is tuple:
            args = [a for a in typing.get_args(target) if a is not Ellipsis]
            component = args[0] if args else None
            if component is None and descriptor is not None:
                component = descriptor.component
            component_result = ResultKind.UNSUPPORTED
            if component is not None:
                component = _unwrap(component)
                if self.converter.is_convertible(component):
                    component_result = ResultKind.SCALAR
                elif is_contract(component):
                    component_result = ResultKind.PROJECTION
            kind = ResultKind.LIST if origin is list else ResultKind.TUPLE
            return kind, origin, component, component_result

        return ResultKind.UNSUPPORTED, target, None, ResultKind.UNSUPPORTED

    def operation(self, name: str) -> Operation:
        return self.operations[name]


def _is_operation(cls: type, name: str, function: Callable[..., Any]) -> bool:
    if cls is Projection:
        return True
    if hasattr(function, DESCRIPTOR_ATTR):
        return True
    if name.startswith("__"):
        return False
    return getattr(function, "__isabstractmethod__", False)


def _unwrap(hint: Any) -> Any:
    """Strip Annotated[...] and Optional[...] around a type"""
    if typing.get_origin(hint) is typing.Annotated:
        hint = typing.get_args(hint)[0]
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not _NONE_TYPE]
        if len(args) == 1:
            return _unwrap(args[0])
    return hint


def _value_index(parameters: List[inspect.Parameter], hints: Dict[str, Any]) -> int:
    for index, parameter in enumerate(parameters):
        hint = hints.get(parameter.name)
        if typing.get_origin(hint) is typing.Annotated:
            if any(marker is Value for marker in hint.__metadata__):
                return index
    return 0
