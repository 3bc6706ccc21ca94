"""
Projection base contract

Every contract derives from Projection. Its own two operations make up the
self-metadata contract and are answered without touching the tree.
"""

from abc import ABC, abstractmethod
from typing import Any


class Projection(ABC):
    """
    A contract instance bound to a tree node

    Instances are created by XMLProjector; two projections are equal when they share
    contract and node.
    """

    @abstractmethod
    def xml_node(self) -> Any:
        """The bound lxml document or element"""

    @abstractmethod
    def projection_contract(self) -> type:
        """The contract class this projection was created for"""


def is_contract(candidate: Any) -> bool:
    """Whether candidate is a contract class (a Projection subclass)"""
    return isinstance(candidate, type) and issubclass(candidate, Projection)
