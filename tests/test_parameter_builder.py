"""Tests for the Parameter Set Builder."""

import pytest

from config import Settings
from contracts import FatalConfigError, NodeRole, ParameterOverrides, ValidationError
from orchestrator.parameter_builder import build_parameter_set, validate_role


def owner_is_consul(path):
    return "consul"


@pytest.fixture
def defaults(tmp_path):
    return Settings(consul_install_dir=str(tmp_path / "consul"))


class TestValidateRole:
    """Test mutual exclusivity of role flags."""

    def test_server(self):
        assert validate_role(ParameterOverrides(server=True)) == NodeRole.SERVER

    def test_client(self):
        assert validate_role(ParameterOverrides(client=True)) == NodeRole.CLIENT

    def test_both_roles_rejected(self):
        with pytest.raises(ValidationError, match="not both"):
            validate_role(ParameterOverrides(server=True, client=True))

    def test_no_role_rejected(self):
        with pytest.raises(ValidationError):
            validate_role(ParameterOverrides())


class TestBuildParameterSet:
    """Test merging overrides with defaults."""

    def test_defaults_applied(self, defaults):
        params = build_parameter_set(
            ParameterOverrides(server=True), defaults, owner_lookup=owner_is_consul
        )
        assert params.role == NodeRole.SERVER
        assert params.raft_protocol == 3
        assert params.config_dir == str(defaults.get_default_config_dir())
        assert params.data_dir == str(defaults.get_default_data_dir())
        assert params.log_dir == str(defaults.get_default_log_dir())
        assert params.bin_dir == str(defaults.get_default_bin_dir())
        assert params.user == "consul"
        assert params.cluster_tag_name is None
        assert params.encrypt_key is None
        assert params.skip_consul_config is False

    def test_autopilot_defaults(self, defaults):
        params = build_parameter_set(
            ParameterOverrides(client=True), defaults, owner_lookup=owner_is_consul
        )
        autopilot = params.autopilot
        assert autopilot.cleanup_dead_servers is True
        assert autopilot.last_contact_threshold == "200ms"
        assert autopilot.max_trailing_logs == 250
        assert autopilot.server_stabilization_time == "10s"
        assert autopilot.redundancy_zone_tag == "az"
        assert autopilot.disable_upgrade_migration is False
        assert autopilot.upgrade_version_tag is None

    def test_autopilot_overrides_are_independent(self, defaults):
        """Overriding one autopilot field leaves the others at their defaults."""
        params = build_parameter_set(
            ParameterOverrides(
                client=True,
                autopilot_cleanup_dead_servers=False,
                autopilot_max_trailing_logs=0,
                autopilot_upgrade_version_tag="build",
            ),
            defaults,
            owner_lookup=owner_is_consul,
        )
        autopilot = params.autopilot
        assert autopilot.cleanup_dead_servers is False
        assert autopilot.max_trailing_logs == 0
        assert autopilot.upgrade_version_tag == "build"
        assert autopilot.last_contact_threshold == "200ms"
        assert autopilot.server_stabilization_time == "10s"

    def test_empty_redundancy_zone_tag_allowed(self, defaults):
        params = build_parameter_set(
            ParameterOverrides(client=True, autopilot_redundancy_zone_tag=""),
            defaults,
            owner_lookup=owner_is_consul,
        )
        assert params.autopilot.redundancy_zone_tag == ""

    def test_durations_not_validated(self, defaults):
        """Malformed durations pass through for the agent to reject."""
        params = build_parameter_set(
            ParameterOverrides(client=True, autopilot_last_contact_threshold="soon"),
            defaults,
            owner_lookup=owner_is_consul,
        )
        assert params.autopilot.last_contact_threshold == "soon"

    def test_explicit_values_override(self, defaults):
        params = build_parameter_set(
            ParameterOverrides(
                server=True,
                cluster_tag_name="consul-servers",
                raft_protocol=2,
                config_dir="/etc/consul",
                data_dir="/var/lib/consul",
                log_dir="/var/log/consul",
                bin_dir="/usr/local/bin",
                user="alice",
                skip_consul_config=True,
            ),
            defaults,
            owner_lookup=owner_is_consul,
        )
        assert params.cluster_tag_name == "consul-servers"
        assert params.raft_protocol == 2
        assert params.config_dir == "/etc/consul"
        assert params.data_dir == "/var/lib/consul"
        assert params.log_dir == "/var/log/consul"
        assert params.bin_dir == "/usr/local/bin"
        assert params.user == "alice"
        assert params.skip_consul_config is True

    def test_default_user_is_config_dir_owner(self, defaults):
        seen = []

        def lookup(path):
            seen.append(path)
            return "owner"

        params = build_parameter_set(
            ParameterOverrides(client=True, config_dir="/etc/consul"),
            defaults,
            owner_lookup=lookup,
        )
        assert params.user == "owner"
        assert seen == ["/etc/consul"]

    def test_owner_lookup_not_used_when_user_given(self, defaults):
        def lookup(path):
            raise AssertionError("owner lookup should not run")

        params = build_parameter_set(
            ParameterOverrides(client=True, user="consul"), defaults, owner_lookup=lookup
        )
        assert params.user == "consul"

    def test_owner_lookup_failure_is_fatal(self, defaults):
        """The real lookup fails for a config dir that does not exist."""
        with pytest.raises(FatalConfigError):
            build_parameter_set(ParameterOverrides(client=True), defaults)

    def test_encrypt_key_tri_state(self, defaults):
        absent = build_parameter_set(
            ParameterOverrides(client=True), defaults, owner_lookup=owner_is_consul
        )
        empty = build_parameter_set(
            ParameterOverrides(client=True, encrypt_key=""), defaults, owner_lookup=owner_is_consul
        )
        value = build_parameter_set(
            ParameterOverrides(client=True, encrypt_key="abc=="),
            defaults,
            owner_lookup=owner_is_consul,
        )
        assert absent.encrypt_key is None
        assert empty.encrypt_key == ""
        assert value.encrypt_key == "abc=="

    @pytest.mark.parametrize(
        "field_name",
        ["cluster_tag_name", "config_dir", "data_dir", "log_dir", "bin_dir", "user",
         "autopilot_last_contact_threshold", "autopilot_server_stabilization_time"],
    )
    def test_required_if_present_rejects_empty(self, defaults, field_name):
        overrides = ParameterOverrides(client=True, **{field_name: ""})
        with pytest.raises(ValidationError, match="cannot be empty"):
            build_parameter_set(overrides, defaults, owner_lookup=owner_is_consul)

    def test_negative_trailing_logs_rejected(self, defaults):
        """Library callers get the bootstrap ValidationError, not a pydantic one."""
        overrides = ParameterOverrides(client=True, autopilot_max_trailing_logs=-1)
        with pytest.raises(ValidationError, match="cannot be negative"):
            build_parameter_set(overrides, defaults, owner_lookup=owner_is_consul)

    def test_role_checked_before_anything_else(self, defaults):
        def lookup(path):
            raise AssertionError("owner lookup should not run")

        with pytest.raises(ValidationError):
            build_parameter_set(
                ParameterOverrides(server=True, client=True), defaults, owner_lookup=lookup
            )
