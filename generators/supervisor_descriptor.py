"""Supervised Process Descriptor Generator - the supervisord program entry for Consul."""

import configparser
import io
import logging
from pathlib import Path
from typing import Optional, Union

from config import settings
from contracts import ArtifactWriteError, SupervisedProcessDescriptor
from generators.system_users import check_home_dir, resolve_home_dir

logger = logging.getLogger(__name__)


def generate_descriptor(
    config_dir: str,
    data_dir: str,
    log_dir: str,
    bin_dir: str,
    user: str,
    home_dir: Optional[str] = None,
    program_name: Optional[str] = None,
) -> SupervisedProcessDescriptor:
    """Describe how supervisord should run the agent.

    Args:
        config_dir: Agent config directory passed as -config-dir
        data_dir: Agent data directory passed as -data-dir
        log_dir: Directory for stdout/stderr logs
        bin_dir: Directory holding the consul binary
        user: User the agent runs as
        home_dir: Home of ``user``; looked up in the user database if not provided
        program_name: supervisord program name (settings.supervisor_program_name if not provided)

    Returns:
        SupervisedProcessDescriptor

    Raises:
        FatalConfigError: The user is unknown or its home resolves to ``/``
    """
    home = resolve_home_dir(user) if home_dir is None else check_home_dir(user, home_dir)
    return SupervisedProcessDescriptor(
        program_name=program_name or settings.supervisor_program_name,
        command=f"{Path(bin_dir) / 'consul'} agent -config-dir {config_dir} -data-dir {data_dir}",
        stdout_log_path=str(Path(log_dir) / "consul-stdout.log"),
        stderr_log_path=str(Path(log_dir) / "consul-error.log"),
        run_as_user=user,
        run_as_user_home_dir=home,
    )


def render_descriptor(descriptor: SupervisedProcessDescriptor) -> str:
    """Render the descriptor as a supervisord INI program section."""
    parser = configparser.ConfigParser(interpolation=None)
    section = f"program:{descriptor.program_name}"
    parser[section] = {
        "command": descriptor.command,
        "stdout_logfile": descriptor.stdout_log_path,
        "stderr_logfile": descriptor.stderr_log_path,
        "numprocs": str(descriptor.num_procs),
        "autostart": str(descriptor.auto_start).lower(),
        "autorestart": str(descriptor.auto_restart).lower(),
        "stopsignal": descriptor.stop_signal,
        "user": descriptor.run_as_user,
        "environment": f'HOME="{descriptor.run_as_user_home_dir}"',
    }
    buf = io.StringIO()
    parser.write(buf)
    return buf.getvalue()


def write_descriptor(
    descriptor: SupervisedProcessDescriptor,
    path: Optional[Union[str, Path]] = None,
) -> Path:
    """Write the descriptor, replacing any previous one.

    Args:
        descriptor: Descriptor to persist
        path: Target file (settings.supervisor_config_path if not provided)

    Returns:
        Path to the written file
    """
    target = Path(path or settings.supervisor_config_path)
    logger.info("Writing supervisor config to %s", target)
    try:
        target.write_text(render_descriptor(descriptor))
    except OSError as exc:
        raise ArtifactWriteError(f"Could not write {target}: {exc}") from exc
    return target
