"""Dependency injection container."""

from collections.abc import Iterable

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from bizops.util.di import PROVIDERS, Component, get_provider


def mockable_components() -> set[Component]:
    """Names of every component with swappable implementations."""
    return {base.__mock_component__ for base in PROVIDERS if base.is_mockable()}


def select_providers(mocked: Iterable[Component] = ()) -> list[Provider]:
    """Instantiate one provider per registered component.

    Components named in ``mocked`` get their mock implementation, which
    must have been imported so it is visible as a subclass. Everything else
    gets the production implementation.
    """
    mocked = set(mocked)
    return [
        get_provider(base, use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]


def create_container(*overrides: Provider) -> AsyncContainer:
    """Build the production container.

    Settings are loaded from environment variables by ``ProdConfigProvider``.

    Args:
        overrides: Providers registered last, replacing earlier
            registrations of the same types

    Returns:
        Configured DI container with production providers
    """
    return make_async_container(*select_providers(), FastapiProvider(), *overrides)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach ``container`` to ``app`` so routes can use ``FromDishka``."""
    setup_dishka(container, app)
