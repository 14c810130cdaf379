"""
Exceptions raised by rteman.
"""

from typing import Optional


class RtemanError(Exception):
    """Base class for every error raised by rteman."""


class ConfigError(RtemanError, ValueError):
    """The project configuration could not be read or is malformed."""


class ValidationError(RtemanError, ValueError):
    """
    A user supplied runtime environment id is not in the registry.

    Args:
        value: The offending id.
        locator: Where the id was read from, e.g. ``argument.rte_id``.
        list_command: The command that lists the valid ids.
    """

    def __init__(self, value: str, locator: str,
                 list_command: str = "rteman list"):
        self.value = value
        self.locator = locator
        self.list_command = list_command
        super().__init__(
            f"value {value} is invalid for {locator}. "
            f"List valid values with command: {list_command}"
        )


class ActivationError(RtemanError, RuntimeError):
    """The activation task can not be started."""

    def __init__(self, message: str, rte_id: Optional[str] = None):
        self.rte_id = rte_id
        super().__init__(message)
