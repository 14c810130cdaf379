"""
Loading of the project configuration (``rteman.yml``).

Example rteman.yml::

    runtime_environments:
      host:
        enabled: true
      ddev:
        enabled: true

    tasks:
      switch:
        description: "activate the selected runtime environment"
        command: ./scripts/switch-rte.sh {id}

The file is rendered with Jinja2 (see :mod:`rteman.utils.jinja_env`) before
it is parsed.  While rendering, ``RTEMAN_CONF_FILE`` and ``RTEMAN_CONF_DIR``
point at the file being loaded unless they are already set.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import yaml
from jinja2 import TemplateError

from rteman.exceptions import ConfigError
from rteman.utils.jinja_env import render_file
from rteman import log

DEFAULT_CONF_NAME = "rteman.yml"

#: environment variable holding the path of the configuration file
CONF_ENV_VAR = "RTEMAN_CONF"


@contextmanager
def _conf_environ(conf_path: str) -> Iterator[None]:
    """Expose the location of *conf_path* to the template while rendering."""
    added = []
    for name, value in (("RTEMAN_CONF_FILE", conf_path),
                        ("RTEMAN_CONF_DIR", os.path.dirname(conf_path))):
        if name not in os.environ:
            os.environ[name] = value
            added.append(name)
    try:
        yield
    finally:
        for name in added:
            os.environ.pop(name, None)


def find_config_file(start_dir: Optional[str] = None,
                     conf_name: str = DEFAULT_CONF_NAME) -> Optional[str]:
    """
    Look for *conf_name* in *start_dir* and its parents.

    Returns:
        The absolute path of the first match, or None.
    """
    current = os.path.abspath(start_dir or os.getcwd())
    while True:
        candidate = os.path.join(current, conf_name)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def load_config(conf_path: str) -> Dict[str, Any]:
    """
    Render and parse the configuration file at *conf_path*.

    An empty file results in an empty dict.

    Raises:
        ConfigError: If the file can not be read, rendered or parsed, or its
            top level is not a mapping.
    """
    conf_path = os.path.abspath(os.path.expanduser(conf_path))
    if not os.path.isfile(conf_path):
        raise ConfigError(f"config file not found: {conf_path}")

    log.info(f"loading config {conf_path}")
    try:
        with _conf_environ(conf_path):
            rendered = render_file(conf_path)
        conf = yaml.safe_load(rendered)
    except (TemplateError, ValueError) as exc:
        raise ConfigError(f"failed to render {conf_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {conf_path}: {exc}") from exc

    if conf is None:
        return {}
    if not isinstance(conf, dict):
        raise ConfigError(
            f"{conf_path}: expected a mapping at the top level, got "
            f"{type(conf).__name__}"
        )
    return conf


class ProjectConfig:
    """
    The loaded configuration of a project together with its root directory.

    Args:
        conf_path: Path to the config file.  When None, ``$RTEMAN_CONF`` is
            used, and failing that ``rteman.yml`` is searched for upwards
            from the current directory.  A project without a config file has
            an empty configuration.
        project_root: Directory probed for marker files.  Defaults to the
            directory of the config file, or the current directory.
    """

    def __init__(self,
                 conf_path: Optional[str] = None,
                 project_root: Optional[str] = None):

        #: Optional[str]: absolute path of the config file, None if not found
        self.conf_path: Optional[str] = None

        #: Dict[str, Any]: the parsed configuration
        self.data: Dict[str, Any] = {}

        conf_path = conf_path or os.environ.get(CONF_ENV_VAR)
        if conf_path:
            self.conf_path = os.path.abspath(os.path.expanduser(conf_path))
        else:
            self.conf_path = find_config_file(project_root)

        if self.conf_path:
            self.data = load_config(self.conf_path)
        else:
            log.info(f"no {DEFAULT_CONF_NAME} found, using an empty config")

        if project_root:
            root = project_root
        elif self.conf_path:
            root = os.path.dirname(self.conf_path)
        else:
            root = os.getcwd()

        #: str: absolute path of the project root
        self.project_root: str = os.path.abspath(os.path.expanduser(root))

    @property
    def runtime_environments(self) -> Optional[Dict[str, Any]]:
        """The raw ``runtime_environments`` section."""
        return self.data.get("runtime_environments")

    @property
    def tasks(self) -> Dict[str, Any]:
        return self.data.get("tasks") or {}
