"""
Validation of runtime environment ids supplied on the command line.

A command declares where its environment ids come from with *locators* of
the form ``<kind>.<name>``::

    argument.rte_id      # the positional argument 'rte_id'
    option.rte           # the option '--rte'

The locators are parsed once into :class:`InputLocator` objects that carry
the accessor for their kind, and :func:`validate_identifiers` checks every
resolved value against the registry before the command body runs.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from rteman.exceptions import ConfigError, ValidationError
from rteman import log

LIST_COMMAND = "rteman list"


@dataclass(frozen=True)
class CommandInput:
    """The parsed arguments and options of one command invocation."""

    arguments: Mapping[str, Any] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def get_argument(self, name: str) -> Any:
        return self.arguments.get(name)

    def get_option(self, name: str) -> Any:
        return self.options.get(name)


#: locator kind -> accessor reading the named value from a CommandInput
ACCESSORS: Dict[str, Callable[[CommandInput, str], Any]] = {
    "argument": CommandInput.get_argument,
    "option": CommandInput.get_option,
}


@dataclass(frozen=True)
class InputLocator:
    kind: str
    name: str
    accessor: Callable[[CommandInput, str], Any] = field(
        repr=False, compare=False)

    def __str__(self) -> str:
        return f"{self.kind}.{self.name}"

    def resolve(self, command_input: CommandInput) -> Any:
        return self.accessor(command_input, self.name)

    @classmethod
    def parse(cls, locator: str) -> "InputLocator":
        """
        Parse ``<kind>.<name>``.

        Raises:
            ConfigError: If the locator is malformed or its kind is unknown.
        """
        kind, sep, name = locator.strip().partition(".")
        if not sep or not kind or not name:
            raise ConfigError(
                f"invalid input locator '{locator}', expected <kind>.<name>"
            )
        if kind not in ACCESSORS:
            raise ConfigError(
                f"unknown input locator kind '{kind}' in '{locator}', "
                f"supported: {', '.join(ACCESSORS)}"
            )
        return cls(kind=kind, name=name, accessor=ACCESSORS[kind])


def parse_locators(locators: Union[str, Iterable[str]]) -> List[InputLocator]:
    """Parse a comma separated string or an iterable of locator strings."""
    if isinstance(locators, str):
        locators = locators.split(",")
    return [InputLocator.parse(loc) for loc in locators if loc.strip()]


def validate_identifiers(
    locators: Iterable[Union[str, InputLocator]],
    command_input: CommandInput,
    registry: Mapping[str, Any],
    list_command: Optional[str] = None,
) -> None:
    """
    Check that every id the locators point at exists in *registry*.

    Locators whose value is empty or unset are skipped; selecting an
    environment is optional at those call sites.

    Raises:
        ValidationError: For the first value that is not a registry key.
    """
    for locator in locators:
        if isinstance(locator, str):
            locator = InputLocator.parse(locator)

        rte_id = locator.resolve(command_input)
        if not rte_id:
            log.debug(f"{locator} is not set, skipping")
            continue

        if rte_id not in registry:
            raise ValidationError(
                str(rte_id), str(locator), list_command or LIST_COMMAND)

        log.debug(f"{locator} = {rte_id} is a valid runtime environment")
