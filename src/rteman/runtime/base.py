"""
Abstract base for runtime environment kinds and the descriptor they produce.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from rteman.exceptions import ConfigError

#: keys of a configuration entry that are consumed by the registry itself
#: and never end up in a descriptor
RESERVED_KEYS = ("enabled",)


def apply_overrides(defaults: Mapping[str, Any],
                    overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a new dict with *overrides* laid on top of *defaults*.

    Precedence is per field and the user always wins.  When a field holds a
    mapping on both sides the two mappings are merged key by key; anything
    nested deeper than that is replaced wholesale, lists included.  The
    result shares no objects with either input.
    """
    merged = copy.deepcopy(dict(defaults))
    for key, value in copy.deepcopy(dict(overrides)).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True, slots=True)
class EnvironmentDescriptor:
    """Metadata record of one available runtime environment."""

    id: str
    weight: int = 0
    description: str = ""

    # configuration fields the registry does not interpret
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, rte_id: str,
                     data: Mapping[str, Any]) -> "EnvironmentDescriptor":
        """
        Build a descriptor from a flat configuration mapping.

        Raises:
            ConfigError: If ``weight`` is not an integer.
        """
        weight = data.get("weight", 0)
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ConfigError(
                f"runtime environment '{rte_id}': weight must be an integer, "
                f"got {weight!r}"
            )

        description = data.get("description", "")
        extra = {
            key: value for key, value in data.items()
            if key not in ("weight", "description") + RESERVED_KEYS
        }

        return cls(
            id=rte_id,
            weight=weight,
            description="" if description is None else str(description),
            extra=extra,
        )

    def as_dict(self) -> Dict[str, Any]:
        """Flat mapping used for output and as the activation parameters."""
        data: Dict[str, Any] = {
            "weight": self.weight,
            "description": self.description,
        }
        data.update(self.extra)
        return data


class RuntimeKind(ABC):
    """
    A kind of runtime environment the registry knows how to build.

    The configuration entry of the environment with the same id as
    :attr:`name` is handed to :meth:`is_available` and :meth:`build`.
    """

    #: bool: whether the user's configuration fields are laid on top of
    #: :attr:`defaults`
    overlay_config = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Environment id handled by this kind, e.g. 'host' or 'ddev'."""

    @property
    def defaults(self) -> Dict[str, Any]:
        """Descriptor fields used when the configuration does not set them."""
        return {}

    def is_available(self, project_root: str, entry: Mapping[str, Any]) -> bool:
        """
        Return True if the environment can be selected in *project_root*.

        Only called for entries that are enabled in the configuration.  The
        default implementation has no precondition.
        """
        return True

    def build(self, entry: Mapping[str, Any]) -> EnvironmentDescriptor:
        """Create the descriptor for the configuration *entry*."""
        if self.overlay_config:
            data = apply_overrides(self.defaults, entry)
        else:
            data = copy.deepcopy(dict(self.defaults))
        return EnvironmentDescriptor.from_mapping(self.name, data)


class GenericRuntimeKind(RuntimeKind):
    """Kind used for configured ids that no registered kind handles."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name
