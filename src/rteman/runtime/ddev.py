"""
DDEV runtime – the project runs inside the containers managed by DDEV.

The environment is only offered when the project has been set up for DDEV,
i.e. ``<project_root>/.ddev/config.yaml`` exists; a directory of that name
counts as well.  Unlike the host runtime, the descriptor is always the
static default; fields from the configuration entry are not laid on top of
it.
"""

import os
from typing import Any, Dict, Mapping

from rteman.runtime.base import RuntimeKind
from rteman import log


class DdevRuntimeKind(RuntimeKind):

    overlay_config = False

    #: str: marker file, relative to the project root
    marker_file = os.path.join(".ddev", "config.yaml")

    @property
    def name(self) -> str:
        return "ddev"

    @property
    def defaults(self) -> Dict[str, Any]:
        return {"description": "Runtime environment provided by DDev"}

    def marker_path(self, project_root: str) -> str:
        """Return the absolute path of the DDEV config file."""
        return os.path.join(os.path.abspath(project_root), self.marker_file)

    def is_available(self, project_root: str, entry: Mapping[str, Any]) -> bool:
        path = self.marker_path(project_root)
        if os.path.exists(path):
            return True
        log.info(f"ddev is enabled but {path} does not exist")
        return False
