"""
Operation declarations

Decorators attach an OperationDescriptor to contract methods:

    class Person(Projection):
        @read("/person/@name")
        def get_name(self) -> str: ...

        @write("/person/@name")
        def set_name(self, name: str) -> "Person": ...

        @delete("/person/nickname")
        def drop_nicknames(self) -> None: ...

doc_url() redirects an operation (or names the default source of a whole contract) to a
document loaded from a URI template. Value marks the parameter holding the value to
write when it is not the first one.
"""

from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

DESCRIPTOR_ATTR = "__xmlproj_operation__"
DOC_URL_ATTR = "__xmlproj_doc_url__"

F = TypeVar("F", bound=Callable[..., Any])


class OperationRole(str, Enum):
    """Role tag of a declared operation"""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class OperationDescriptor(BaseModel):
    """
    Declared operation metadata

    Attributes:
        role: read, write or delete
        path: Path template with {0}, {1}, ... placeholders
        component: Element type for list or tuple results
        doc_url: URI template of the document to evaluate against instead of the
            bound node
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    role: OperationRole
    path: str
    component: Optional[Any] = None
    doc_url: Optional[str] = None


class _ValueMarker:
    """Annotated[...] marker for the parameter carrying the value of a write"""

    def __repr__(self) -> str:
        return "Value"


Value = _ValueMarker()


def _declare(descriptor: OperationDescriptor) -> Callable[[F], F]:
    def decorator(function: F) -> F:
        setattr(function, DESCRIPTOR_ATTR, descriptor)
        return function

    return decorator


def read(path: str, component: Optional[Any] = None) -> Callable[[F], F]:
    """Declare a getter evaluating path; component types list results"""
    return _declare(OperationDescriptor(role=OperationRole.READ, path=path, component=component))


def write(path: str) -> Callable[[F], F]:
    """Declare a setter writing its value to path"""
    return _declare(OperationDescriptor(role=OperationRole.WRITE, path=path))


def delete(path: str) -> Callable[[F], F]:
    """Declare an operation removing every node path selects"""
    return _declare(OperationDescriptor(role=OperationRole.DELETE, path=path))


def doc_url(uri: str) -> Callable[[Any], Any]:
    """
    Evaluate an operation against the document at uri instead of the bound node

    On a contract class, uri is the document XMLProjector.load_for() opens. The
    template takes the same positional placeholders as paths.
    """

    def decorator(target: Any) -> Any:
        setattr(target, DOC_URL_ATTR, uri)
        return target

    return decorator
