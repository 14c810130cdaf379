"""
Jinja2 helpers for rendering rteman.yml.

The configuration file is a Jinja2 template rendered before it is parsed as
YAML, so values can be taken from the process environment::

    runtime_environments:
      ddev:
        enabled: {{ env_is_set("DDEV_PROJECT") }}
        php_version: {{ env("PHP_VERSION", default="8.3") }}
      host:
        enabled: true
        db_url: {{ env_required("DB_URL", "DB_URL must point to the host db") }}
"""

import os
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined


def env(var_name: str, default: str = "") -> str:
    """
    Return the value of environment variable *var_name*, or *default* when
    it is not set.
    """
    return os.environ.get(var_name, default)


def env_required(var_name: str, message: Optional[str] = None) -> str:
    """
    Return the value of environment variable *var_name*.

    Raises ``ValueError`` if the variable is not set or is empty.
    """
    value = os.environ.get(var_name)
    if not value:
        raise ValueError(
            message or f"required environment variable '{var_name}' is not set")
    return value


def env_is_set(var_name: str) -> bool:
    return bool(os.environ.get(var_name))


def create_jinja_env(search_path: str,
                     extra_globals: Optional[Dict[str, Any]] = None) -> Environment:
    """
    Create a Jinja2 :class:`Environment` with the env helpers registered as
    globals.

    Undefined names raise instead of silently rendering as an empty string,
    a typo in rteman.yml would otherwise disable an environment.

    Args:
        search_path: Directory used as the template search path.
        extra_globals: Additional globals made available to the templates.
    """
    jinja_env = Environment(
        loader=FileSystemLoader(search_path),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    jinja_env.globals.update({
        "env": env,
        "env_required": env_required,
        "env_is_set": env_is_set,
    })
    if extra_globals:
        jinja_env.globals.update(extra_globals)
    return jinja_env


def render_file(path: str, **context: Any) -> str:
    """Render the template file at *path* and return the text."""
    path = os.path.abspath(os.path.expanduser(path))
    jinja_env = create_jinja_env(os.path.dirname(path))
    return jinja_env.get_template(os.path.basename(path)).render(**context)
