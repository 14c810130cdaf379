"""
Runtime environment registry.

A *runtime environment* is a named way of running the project:
  - ``host``  – directly on the host machine
  - ``ddev``  – inside the containers of a DDEV project

The registry is assembled from the ``runtime_environments`` section of the
project configuration on every call; nothing is cached or persisted::

    runtime_environments:
      host:
        enabled: true
        weight: 10
      ddev:
        enabled: true

Further kinds are added with :func:`register_kind`.  Ids without a
registered kind are still offered when enabled, with their configuration
fields used as the descriptor.
"""

from typing import Any, Dict, List, Mapping, Optional

from rteman.exceptions import ConfigError
from rteman.runtime.base import (
    EnvironmentDescriptor,
    GenericRuntimeKind,
    RuntimeKind,
)
from rteman.runtime.host import HostRuntimeKind
from rteman.runtime.ddev import DdevRuntimeKind
from rteman import log

#: Registry = ordered mapping of environment id to its descriptor
Registry = Dict[str, EnvironmentDescriptor]

_KINDS: Dict[str, RuntimeKind] = {}


def register_kind(kind: RuntimeKind) -> None:
    """
    Make *kind* responsible for the environment id ``kind.name``.

    Registering a kind under an id that is already taken replaces it.
    """
    if kind.name in _KINDS:
        log.debug(f"replacing runtime kind '{kind.name}'")
    _KINDS[kind.name] = kind


def unregister_kind(name: str) -> None:
    """Remove the kind registered under *name*, if any."""
    _KINDS.pop(name, None)


def registered_kinds() -> Dict[str, RuntimeKind]:
    """Return a copy of the kind table."""
    return dict(_KINDS)


def build_registry(
    config: Optional[Mapping[str, Any]],
    project_root: str,
    kinds: Optional[Mapping[str, RuntimeKind]] = None,
) -> Registry:
    """
    Build the registry of the runtime environments available in a project.

    Args:
        config: The ``runtime_environments`` section of the configuration,
            id -> ``{enabled, description?, weight?, ...}``.  May be None.
        project_root: Directory probed for environment specific marker files.
        kinds: Kind table to use instead of the registered kinds.

    Returns:
        Mapping of id to descriptor, holding only the environments that are
        enabled and pass their availability check.  Empty when there is no
        configuration.

    Raises:
        ConfigError: If the section or one of its entries is not a mapping.
    """
    if not config:
        log.debug("no runtime environments are configured")
        return {}

    if not isinstance(config, Mapping):
        raise ConfigError(
            f"runtime_environments must be a mapping, got "
            f"{type(config).__name__}"
        )

    kinds = _KINDS if kinds is None else kinds

    registry: Registry = {}
    for rte_id, entry in config.items():
        rte_id = str(rte_id)
        if entry is None:
            entry = {}
        if not isinstance(entry, Mapping):
            raise ConfigError(
                f"runtime environment '{rte_id}' must be a mapping, got "
                f"{type(entry).__name__}"
            )

        if not entry.get("enabled"):
            log.debug(f"runtime environment '{rte_id}' is disabled")
            continue

        kind = kinds.get(rte_id) or GenericRuntimeKind(rte_id)
        if not kind.is_available(project_root, entry):
            log.debug(f"runtime environment '{rte_id}' is not available")
            continue

        registry[rte_id] = kind.build(entry)

    return registry


def list_environments(registry: Registry) -> List[EnvironmentDescriptor]:
    """Return the descriptors ordered by weight, ties broken by id."""
    return sorted(registry.values(), key=lambda rte: (rte.weight, rte.id))


register_kind(HostRuntimeKind())
register_kind(DdevRuntimeKind())
