"""
Activation of a runtime environment.

rteman itself does not know how to switch a project between runtime
environments; it hands the selected descriptor to an :class:`Activator`.
The default :class:`TaskActivator` runs the ``switch`` task defined in
rteman.yml::

    tasks:
      switch:
        description: "activate the selected runtime environment"
        command: ./scripts/activate.sh --rte {id} --php {php_version}
        workdir: ~/projects/site

``{placeholder}`` markers are filled from the descriptor (``id``,
``weight``, ``description`` and any extra field) and shell quoted; markers
without a value are removed.  The task also receives the descriptor through environment
variables:

    RTEMAN_RTE_ID           the id of the environment
    RTEMAN_RTE_DESCRIPTOR   the descriptor as JSON
    RTEMAN_PROJECT_ROOT     the project root
    RTEMAN_ENVIRONMENT_TYPE the detected execution context ('dev', 'ci')
    RTEMAN_ENVIRONMENT_NAME 'local', 'jenkins', 'gitlab', ...
"""

import json
import os
import re
import shlex
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

import invoke

from rteman.exceptions import ActivationError
from rteman.runtime.base import EnvironmentDescriptor
from rteman.utils.environment import (
    ExecutionContext,
    detect_execution_context,
    env_var_name,
)
from rteman import log

SWITCH_TASK = "switch"


class Activator(ABC):
    """Performs the switch to a runtime environment."""

    @abstractmethod
    def switch(self, descriptor: EnvironmentDescriptor) -> int:
        """
        Activate the environment described by *descriptor*.

        Returns:
            The exit code of the activation, 0 on success.
        """


class TaskActivator(Activator):
    """
    Runs the ``switch`` task of the project configuration.

    Args:
        tasks: The ``tasks`` section of the configuration.
        project_root: The project root, exported to the task and used as the
            working directory unless the task sets ``workdir``.
        context: Execution context exported to the task; detected from the
            environment when not given.
    """

    def __init__(
        self,
        tasks: Optional[Mapping[str, Any]],
        project_root: str,
        context: Optional[ExecutionContext] = None,
    ):
        self.tasks: Mapping[str, Any] = tasks or {}
        self.project_root = project_root
        self.context = context or detect_execution_context()

    @staticmethod
    def extract_placeholders(command: str):
        """Return the ``{name}`` placeholder names found in *command*."""
        return re.findall(r"\{(\w+)\}", command)

    @staticmethod
    def render_command(command: str, params: Mapping[str, Any]) -> str:
        """
        Substitute ``{name}`` markers with *params*, dropping unknown ones.

        Each value is shell quoted so that it reaches the task as a single
        word. Mappings and lists are passed as JSON.
        """

        def _drop_missing(match):
            if params.get(match.group(1)) is None:
                return ""
            return match.group(0)

        def _quote(match):
            value = params[match.group(1)]
            if isinstance(value, (dict, list)):
                value = json.dumps(value)
            return shlex.quote(str(value))

        # spacing is normalized on the template only, values are kept as is
        command = re.sub(r"\{(\w+)\}", _drop_missing, command.strip())
        command = re.sub(r" {2,}", " ", command).strip()
        return re.sub(r"\{(\w+)\}", _quote, command)

    def task_env(self, descriptor: EnvironmentDescriptor) -> Dict[str, str]:
        """Environment variables handed to the task process."""
        return {
            env_var_name("rte_id"): descriptor.id,
            env_var_name("rte_descriptor"): json.dumps(
                descriptor.as_dict(), sort_keys=True, default=str),
            env_var_name("project_root"): self.project_root,
            env_var_name("environment_type"): self.context.type,
            env_var_name("environment_name"): self.context.name,
        }

    def switch(self, descriptor: EnvironmentDescriptor) -> int:
        """
        Run the switch task for *descriptor*.

        Returns:
            The exit code of the task process, unchanged.

        Raises:
            ActivationError: If no switch task is configured.
        """
        task = self.tasks.get(SWITCH_TASK)
        if not isinstance(task, Mapping) or not task.get("command"):
            raise ActivationError(
                f"no '{SWITCH_TASK}' task with a command is defined in the "
                f"tasks section, can not activate '{descriptor.id}'",
                rte_id=descriptor.id,
            )

        params = {**descriptor.as_dict(), "id": descriptor.id}
        missing = [
            name for name in self.extract_placeholders(str(task["command"]))
            if params.get(name) is None
        ]
        if missing:
            log.warning(
                f"no value for placeholder(s) {', '.join(missing)} of the "
                f"'{SWITCH_TASK}' task, they are left empty")
        command = self.render_command(str(task["command"]), params)

        workdir = os.path.expanduser(task.get("workdir") or self.project_root)

        log.info(f"switching to runtime environment '{descriptor.id}'")
        log.info(f"command: {command}")

        ctx = invoke.Context()
        with ctx.cd(workdir):
            result = ctx.run(
                command,
                env=self.task_env(descriptor),
                warn=True,
                hide=False,
                in_stream=False,
            )

        if result.return_code != 0:
            log.error(
                f"switch task for '{descriptor.id}' exited with "
                f"{result.return_code}")
        return result.return_code
