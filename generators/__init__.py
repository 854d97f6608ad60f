"""Generators for the artifacts written during a bootstrap run."""

from .consul_config import (
    build_retry_join,
    generate_consul_config,
    render_consul_config,
    write_consul_config,
)
from .supervisor_descriptor import (
    generate_descriptor,
    render_descriptor,
    write_descriptor,
)
from .system_users import check_home_dir, get_path_owner, resolve_home_dir

__all__ = [
    "build_retry_join",
    "generate_consul_config",
    "render_consul_config",
    "write_consul_config",
    "generate_descriptor",
    "render_descriptor",
    "write_descriptor",
    "check_home_dir",
    "get_path_owner",
    "resolve_home_dir",
]
