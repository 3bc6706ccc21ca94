"""
MixinRegistry Unit Tests
"""

import logging
from abc import ABC, abstractmethod

import pytest

from xmlproj.core.errors import ConfigurationError
from xmlproj.core.mixins import MixinRegistry
from xmlproj.core.projection import Projection


class Validation(ABC):
    @abstractmethod
    def is_valid(self) -> bool: ...


class Person(Projection, Validation):
    pass


class Unrelated(ABC):
    pass


class TestMixinRegistry:
    """Test registration and lookup"""

    def test_add_and_get(self):
        """Registered factories are found by contract and mixin contract"""
        registry = MixinRegistry()
        factory = lambda me: object()  # noqa: E731

        assert registry.add_mixin(Person, Validation, factory) is registry
        assert registry.get_mixin_factory(Person, Validation) is factory
        assert registry.get_mixin_factory(Person, Unrelated) is None

    def test_unrelated_mixin_contract(self):
        """The contract has to inherit the mixin contract"""
        with pytest.raises(ConfigurationError):
            MixinRegistry().add_mixin(Person, Unrelated, lambda me: object())

    def test_replace_warns(self, caplog):
        """Replacing a registration is logged"""
        registry = MixinRegistry()
        registry.add_mixin(Person, Validation, lambda me: object())
        with caplog.at_level(logging.WARNING, logger="xmlproj.core.mixins"):
            registry.add_mixin(Person, Validation, lambda me: object())
        assert "Replacing mixin" in caplog.text

    def test_remove(self):
        """Removed registrations are gone, removing twice is harmless"""
        registry = MixinRegistry()
        registry.add_mixin(Person, Validation, lambda me: object())
        registry.remove_mixin(Person, Validation)
        registry.remove_mixin(Person, Validation)
        assert registry.get_mixin_factory(Person, Validation) is None
