"""
Host runtime – the project runs directly on the host machine.
"""

from typing import Any, Dict

from rteman.runtime.base import RuntimeKind


class HostRuntimeKind(RuntimeKind):

    @property
    def name(self) -> str:
        return "host"

    @property
    def defaults(self) -> Dict[str, Any]:
        return {
            "weight": -99,
            "description": "Uses the host machine without any virtualization",
        }
