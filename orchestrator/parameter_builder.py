"""Parameter Set Builder - merges caller overrides with compiled defaults.

The merge is a pure function of (defaults, overrides). The only collaborator is the
owner lookup used to pick a default run-as user, and it is injectable.
"""

import logging
from typing import Callable, Optional

from config import Settings, settings
from contracts import (
    AutopilotSettings,
    NodeRole,
    ParameterOverrides,
    ParameterSet,
    ValidationError,
)
from generators.system_users import get_path_owner

logger = logging.getLogger(__name__)

# Options that may be omitted but must not be given an empty value
REQUIRED_IF_PRESENT = (
    "cluster_tag_name",
    "config_dir",
    "data_dir",
    "log_dir",
    "bin_dir",
    "user",
    "autopilot_last_contact_threshold",
    "autopilot_server_stabilization_time",
)


def validate_role(overrides: ParameterOverrides) -> NodeRole:
    """Return the selected role; exactly one of server/client must be set."""
    if overrides.server and overrides.client:
        raise ValidationError("Exactly one of --server or --client must be set, not both")
    if overrides.server:
        return NodeRole.SERVER
    if overrides.client:
        return NodeRole.CLIENT
    raise ValidationError("Exactly one of --server or --client must be set")


def _validate_overrides(overrides: ParameterOverrides) -> None:
    for field_name in REQUIRED_IF_PRESENT:
        if getattr(overrides, field_name) == "":
            flag = "--" + field_name.replace("_", "-")
            raise ValidationError(f"The value for '{flag}' cannot be empty")
    if (overrides.autopilot_max_trailing_logs or 0) < 0:
        raise ValidationError(
            "The value for '--autopilot-max-trailing-logs' cannot be negative, "
            f"got {overrides.autopilot_max_trailing_logs}"
        )


def _pick(override, default):
    return default if override is None else override


def build_autopilot(overrides: ParameterOverrides, defaults: Settings) -> AutopilotSettings:
    """Apply autopilot overrides field by field over the defaults."""
    return AutopilotSettings(
        cleanup_dead_servers=_pick(
            overrides.autopilot_cleanup_dead_servers, defaults.autopilot_cleanup_dead_servers
        ),
        last_contact_threshold=_pick(
            overrides.autopilot_last_contact_threshold, defaults.autopilot_last_contact_threshold
        ),
        max_trailing_logs=_pick(
            overrides.autopilot_max_trailing_logs, defaults.autopilot_max_trailing_logs
        ),
        server_stabilization_time=_pick(
            overrides.autopilot_server_stabilization_time,
            defaults.autopilot_server_stabilization_time,
        ),
        redundancy_zone_tag=_pick(
            overrides.autopilot_redundancy_zone_tag, defaults.autopilot_redundancy_zone_tag
        ),
        disable_upgrade_migration=_pick(
            overrides.autopilot_disable_upgrade_migration,
            defaults.autopilot_disable_upgrade_migration,
        ),
        upgrade_version_tag=_pick(
            overrides.autopilot_upgrade_version_tag, defaults.autopilot_upgrade_version_tag
        ),
    )


def build_parameter_set(
    overrides: ParameterOverrides,
    defaults: Optional[Settings] = None,
    owner_lookup: Callable[[str], str] = get_path_owner,
) -> ParameterSet:
    """Build the effective parameter set.

    Args:
        overrides: Raw caller input
        defaults: Compiled defaults (module settings if not provided)
        owner_lookup: Returns the owner of a path; used when no user is given

    Returns:
        Fully populated ParameterSet

    Raises:
        ValidationError: Role flags conflict, a required-if-present value is empty,
            or the trailing-log limit is negative
        FatalConfigError: No user was given and the config dir owner cannot be found
    """
    defaults = defaults or settings
    role = validate_role(overrides)
    _validate_overrides(overrides)

    config_dir = overrides.config_dir or str(defaults.get_default_config_dir())
    user = overrides.user or owner_lookup(config_dir)

    params = ParameterSet(
        role=role,
        cluster_tag_name=overrides.cluster_tag_name,
        raft_protocol=_pick(overrides.raft_protocol, defaults.raft_protocol),
        config_dir=config_dir,
        data_dir=overrides.data_dir or str(defaults.get_default_data_dir()),
        log_dir=overrides.log_dir or str(defaults.get_default_log_dir()),
        bin_dir=overrides.bin_dir or str(defaults.get_default_bin_dir()),
        user=user,
        skip_consul_config=overrides.skip_consul_config,
        encrypt_key=overrides.encrypt_key,
        autopilot=build_autopilot(overrides, defaults),
    )
    logger.debug("Effective parameters: %s", params.model_dump(exclude={"encrypt_key"}))
    return params
