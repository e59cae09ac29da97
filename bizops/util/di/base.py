"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests swap for in-memory or recording twins
Component = Literal["persistence", "email", "identity_provider"]


class ProviderBase(Provider):
    """Base for all DI providers.

    A mockable component is declared as an abstract provider that names its
    ``__mock_component__``; its production and mock implementations subclass
    it and set ``__is_mock__``. Concrete providers leave both at their
    defaults.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether this provider stands for a swappable component."""
        return cls.__mock_component__ is not None
