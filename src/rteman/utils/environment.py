"""
Detection of the context rteman is executed in (a developer machine or a CI
service).

The values are exported to the activation task so that it can behave
differently on CI, and are shown by ``rteman config export``.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_VAR_PREFIX = "RTEMAN"


def env_var_name(name: str, prefix: str = ENV_VAR_PREFIX) -> str:
    """Return the prefixed environment variable name, e.g. RTEMAN_ENVIRONMENT_TYPE."""
    return f"{prefix}_{name.upper()}"


@dataclass(frozen=True)
class ExecutionContext:
    #: 'ci' or 'dev' unless set explicitly
    type: str
    #: e.g. 'jenkins', 'gitlab', 'travis', 'circleci' or 'local'
    name: str

    def as_dict(self):
        return {"type": self.type, "name": self.name}


def detect_execution_context(
        environ: Optional[Mapping[str, str]] = None) -> ExecutionContext:
    """
    Work out the execution context from environment variables.

    ``RTEMAN_ENVIRONMENT_TYPE`` and ``RTEMAN_ENVIRONMENT_NAME`` win when set.
    Otherwise the variables exported by the common CI services are looked
    at, and the fallback is ``dev`` / ``local``.
    """
    environ = os.environ if environ is None else environ

    env_type = environ.get(env_var_name("environment_type"), "")
    env_name = environ.get(env_var_name("environment_name"), "")

    if not env_type:
        if environ.get("CI") == "true":
            # Travis, GitLab and CircleCI
            env_type = "ci"
        elif environ.get("JENKINS_HOME"):
            env_type = "ci"
            env_name = env_name or "jenkins"

    if not env_name and env_type == "ci":
        if environ.get("GITLAB_CI") == "true":
            env_name = "gitlab"
        elif environ.get("TRAVIS") == "true":
            env_name = "travis"
        elif environ.get("CIRCLECI") == "true":
            env_name = "circleci"

    return ExecutionContext(type=env_type or "dev", name=env_name or "local")
