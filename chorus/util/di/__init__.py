"""Dependency injection module.

Providers come in two kinds:

- concrete: config, domain, application and realtime; used as-is everywhere
- mockable components: a base class naming the component
  (``__mock_component__``) with one production and one mock subclass

Only persistence is mockable. The broadcast hub is in-process and cheap,
so tests use the real one.
"""

from typing import Type

from chorus.util.di.application import ProdApplicationProvider
from chorus.util.di.base import Component, ProviderBase
from chorus.util.di.core import ProdConfigProvider
from chorus.util.di.domain import ProdDomainProvider
from chorus.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
    RealtimeProvider,
)
from chorus.util.error import DependencyInjectionError

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    RealtimeProvider,
    PersistenceProvider,
]


def mockable_components() -> set[Component]:
    """Names of the components that have a mock implementation."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__mock_component__ and base.__subclasses__()
    }


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for one entry of PROVIDERS.

    Args:
        base: Entry of PROVIDERS
        use_mock: For mockable components, pick the mock implementation

    Returns:
        ``base`` itself for concrete providers, otherwise the subclass whose
        ``__is_mock__`` matches ``use_mock``

    Raises:
        DependencyInjectionError: If the component lacks that implementation
    """
    implementations = {
        impl.__is_mock__: impl for impl in base.__subclasses__()
    }
    if not implementations:
        return base

    try:
        return implementations[use_mock]
    except KeyError:
        kind = "mock" if use_mock else "production"
        raise DependencyInjectionError(
            f"No {kind} implementation for {base.__mock_component__ or base.__name__}"
        ) from None


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "mockable_components",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "RealtimeProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
