from typing import Iterable, List, Optional, Union

from rteman.activator import Activator, TaskActivator
from rteman.config import ProjectConfig
from rteman.exceptions import ValidationError
from rteman.runtime import Registry, build_registry, list_environments
from rteman.runtime.base import EnvironmentDescriptor
from rteman.validation import CommandInput, InputLocator, validate_identifiers
from rteman import log


def switch(rte_id: str, registry: Registry, activator: Activator) -> int:
    """
    Hand the descriptor of *rte_id* to *activator*.

    *rte_id* should already have passed :func:`validate_identifiers`; the
    result of the activator is returned as it is.

    Raises:
        ValidationError: If *rte_id* is not in *registry*, the empty id
            included.
    """
    if rte_id not in registry:
        # an empty id is skipped by the gate but can not be switched to
        raise ValidationError(str(rte_id), "argument.rte_id")
    descriptor = registry[rte_id]
    log.debug(f"delegating the switch to '{rte_id}' to {type(activator).__name__}")
    return activator.switch(descriptor)


class RuntimeEnvironmentManager:
    def __init__(self,
                 config: Optional[ProjectConfig] = None,
                 activator: Optional[Activator] = None):
        """
        Initialize the RuntimeEnvironmentManager.

        Args:
            config: The project configuration; loaded from the current
                directory when not given.
            activator: Performs the actual switch.  Defaults to running the
                ``switch`` task of the configuration.
        """
        #: ProjectConfig: the loaded project configuration
        self.config: ProjectConfig = config or ProjectConfig()

        #: the private backing field for the activator property
        self._activator = activator

        #: the logger instance
        self.logger = log

    @property
    def activator(self) -> Activator:
        """The activator, created from the ``tasks`` section on first use."""
        if self._activator is None:
            self._activator = TaskActivator(
                self.config.tasks, self.config.project_root)
        return self._activator

    @activator.setter
    def activator(self, value: Activator) -> None:
        self._activator = value

    def registry(self) -> Registry:
        """Build the registry from the current configuration."""
        return build_registry(
            self.config.runtime_environments, self.config.project_root)

    def list(self) -> List[EnvironmentDescriptor]:
        """Return the available runtime environments ordered by weight."""
        return list_environments(self.registry())

    def validate(self,
                 locators: Iterable[Union[str, InputLocator]],
                 command_input: CommandInput,
                 registry: Optional[Registry] = None) -> None:
        """
        Validation gate for environment dependent commands.

        Raises:
            ValidationError: If a locator resolves to an unknown id.
        """
        if registry is None:
            registry = self.registry()
        validate_identifiers(locators, command_input, registry)

    def switch(self, rte_id: str, registry: Optional[Registry] = None) -> int:
        """
        Switch the project to the runtime environment *rte_id*.

        The id is validated first, the activator is never called with an id
        that is not in the registry.

        Returns:
            The exit code reported by the activator.
        """
        if registry is None:
            registry = self.registry()
        self.validate(
            ["argument.rte_id"], CommandInput(arguments={"rte_id": rte_id}),
            registry)
        return switch(rte_id, registry, self.activator)
