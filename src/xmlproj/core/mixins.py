"""
Mixin registry

A mixin supplies the implementation of a contract's abstract methods. It is registered
as a factory receiving the projection it will serve, so the implementation can call
back into that projection:

    class Validation(ABC):
        @abstractmethod
        def is_valid(self) -> bool: ...

    class Person(Projection, Validation):
        @read("/person/age")
        def get_age(self) -> int: ...

    class PersonValidation:
        def __init__(self, me: Person):
            self.me = me

        def is_valid(self) -> bool:
            return self.me.get_age() >= 0

    projector.mixins.add_mixin(Person, Validation, PersonValidation)
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MixinFactory = Callable[[Any], Any]


class MixinRegistry:
    """Maps (contract, mixin contract) to a mixin factory"""

    def __init__(self) -> None:
        self._factories: Dict[Tuple[type, type], MixinFactory] = {}

    def add_mixin(self, contract: type, mixin_contract: type, factory: MixinFactory) -> "MixinRegistry":
        """
        Register factory for the operations contract inherits from mixin_contract

        Raises:
            ConfigurationError: contract does not derive from mixin_contract
        """
        if not issubclass(contract, mixin_contract):
            raise ConfigurationError(
                f"{contract.__name__} does not inherit from {mixin_contract.__name__}",
                {"contract": contract.__name__, "mixin_contract": mixin_contract.__name__},
            )
        key = (contract, mixin_contract)
        if key in self._factories:
            logger.warning(
                "Replacing mixin for %s/%s", contract.__name__, mixin_contract.__name__
            )
        self._factories[key] = factory
        return self

    def remove_mixin(self, contract: type, mixin_contract: type) -> None:
        self._factories.pop((contract, mixin_contract), None)

    def get_mixin_factory(self, contract: type, mixin_contract: type) -> Optional[MixinFactory]:
        return self._factories.get((contract, mixin_contract))
