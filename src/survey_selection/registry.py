"""Survey registry for mapping survey identifiers to selection strategies."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .dispatcher import compute_range
from .geometry import FieldOfViewRange
from .strategy import SelectionStrategy, SurveyStrategy
from .survey_config import (
    ConfigurationError, SurveyConfigLoader, UnknownSurvey, parameters_from_definition
)


def normalize_identifier(identifier: str) -> str:
    """Canonical form of a survey identifier: trimmed, lower case."""
    if not isinstance(identifier, str):
        raise ConfigurationError(f"Survey identifier must be a string, got {type(identifier).__name__}")
    return identifier.strip().lower()


@dataclass(frozen=True)
class ActiveSurvey:
    """The strategy selected for a run and its frozen field of view."""
    identifier: str
    strategy: SelectionStrategy
    field_of_view: FieldOfViewRange


class SurveyRegistry:
    """Registry mapping survey identifiers to selection strategies."""

    def __init__(self, strategies: Iterable[SelectionStrategy] = ()):
        """Initialize registry with an optional set of strategies.

        Args:
            strategies: Strategies to register under their own names
        """
        self._registry: Dict[str, SelectionStrategy] = {}
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: SelectionStrategy, aliases: Iterable[str] = ()):
        """Register a strategy under its name and any aliases.

        Raises:
            ConfigurationError: If any identifier is empty or already taken
        """
        for identifier in self._check_identifiers(strategy, aliases):
            self._registry[identifier] = strategy

    def _check_identifiers(self, strategy, aliases, taken=()):
        """Normalised identifiers of a strategy, none of them empty or in use."""
        taken = set(taken)
        identifiers = []
        for identifier in [strategy.name, *aliases]:
            identifier = normalize_identifier(identifier)
            if not identifier:
                raise ConfigurationError("Survey identifier must not be empty")
            if identifier in self._registry or identifier in taken:
                raise ConfigurationError(f"Survey '{identifier}' is already registered")
            taken.add(identifier)
            identifiers.append(identifier)
        return identifiers

    def lookup(self, identifier: str) -> SelectionStrategy:
        """Resolve a survey identifier to its strategy.

        Args:
            identifier: Survey name or alias; case and surrounding
                whitespace are ignored

        Returns:
            The registered strategy

        Raises:
            UnknownSurvey: If the identifier is not registered
        """
        key = normalize_identifier(identifier)
        if key not in self._registry:
            raise UnknownSurvey(identifier, list(self._registry))
        return self._registry[key]

    def activate(self, identifier: str) -> ActiveSurvey:
        """Select the survey for a run and compute its field of view.

        The returned value is immutable; it is meant to be created once,
        before any candidate is evaluated, and shared read-only afterwards.
        """
        strategy = self.lookup(identifier)
        return ActiveSurvey(
            identifier=normalize_identifier(identifier),
            strategy=strategy,
            field_of_view=compute_range(strategy),
        )

    def list_surveys(self) -> Dict[str, SelectionStrategy]:
        """Get all registered identifiers and their strategies.

        Returns:
            Dictionary mapping identifiers (including aliases) to strategies
        """
        return self._registry.copy()

    def load_definitions(self, file_path: Union[str, Path]) -> int:
        """Register every survey described in a YAML definition file.

        Returns:
            Number of surveys registered

        Raises:
            ConfigurationError: If the file is invalid or a name collides;
                the registry is left unchanged
        """
        definitions = SurveyConfigLoader().load_survey_definitions(file_path)

        # Nothing from the file is registered unless every survey in it is valid
        pending = []
        taken = set()
        for definition in definitions:
            strategy = SurveyStrategy(parameters_from_definition(definition))
            identifiers = self._check_identifiers(strategy, definition.get("aliases", ()), taken)
            taken.update(identifiers)
            pending.append((strategy, identifiers))

        for strategy, identifiers in pending:
            for identifier in identifiers:
                self._registry[identifier] = strategy
        return len(pending)

    def __contains__(self, identifier):
        return normalize_identifier(identifier) in self._registry


def default_registry() -> SurveyRegistry:
    """Create a fresh registry holding the built-in surveys."""
    from .surveys import BUILTIN_SURVEYS
    return SurveyRegistry(BUILTIN_SURVEYS)


# Global registry instance
_global_registry: Optional[SurveyRegistry] = None


def get_registry() -> SurveyRegistry:
    """Get the global survey registry instance."""
    global _global_registry
    if _global_registry is None:
        _global_registry = default_registry()
    return _global_registry


def resolve_survey(identifier: str) -> SelectionStrategy:
    """Convenience function to resolve a survey identifier to its strategy.

    Args:
        identifier: Survey name or alias

    Returns:
        Registered selection strategy
    """
    return get_registry().lookup(identifier)
