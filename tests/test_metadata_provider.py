"""Tests for the metadata providers."""

import pytest
import requests
from unittest.mock import MagicMock, patch

from contracts import FatalConfigError, MetadataResolutionError, NodeRole
from providers import GCEMetadataProvider, get_provider, parse_region


METADATA = {
    "instance/network-interfaces/0/ip": "10.138.0.2",
    "instance/network-interfaces/1/ip": "10.10.0.7",
    "instance/name": "consul-server-1",
    "project/project-id": "my-project",
    "instance/zone": "projects/123456/zones/us-west1-a",
    "instance/attributes/cluster-size": "3",
}

BASE_URL = "http://metadata.test/computeMetadata/v1"


def _response(text, status_error=None):
    resp = MagicMock()
    resp.text = text
    resp.raise_for_status = MagicMock(side_effect=status_error)
    return resp


def fake_get(metadata):
    def _get(url, headers=None, timeout=None):
        path = url[len(BASE_URL) + 1:]
        if path not in metadata:
            return _response("", requests.HTTPError(f"404 for {path}"))
        return _response(metadata[path] + "\n")
    return _get


@pytest.fixture
def provider():
    return GCEMetadataProvider(base_url=BASE_URL, headers={"Metadata-Flavor": "Google"})


class TestParseRegion:
    """Test zone-to-region derivation."""

    def test_us_west(self):
        assert parse_region("projects/123/zones/us-west1-a") == "us-west1"

    def test_europe_west(self):
        assert parse_region("projects/123/zones/europe-west1-b") == "europe-west1"

    def test_bare_zone_path(self):
        assert parse_region("zones/asia-east1-c") == "asia-east1"

    def test_unrecognized_zone(self):
        with pytest.raises(MetadataResolutionError):
            parse_region("projects/123/regions/us-west1")


class TestGCEMetadataProvider:
    """Test lookups against a mocked metadata server."""

    def test_sends_identification_header(self, provider):
        with patch("requests.get", side_effect=fake_get(METADATA)) as mock_get:
            provider.get_instance_name()
        _, kwargs = mock_get.call_args
        assert kwargs["headers"] == {"Metadata-Flavor": "Google"}
        assert mock_get.call_count == 1

    def test_lookups(self, provider):
        with patch("requests.get", side_effect=fake_get(METADATA)):
            assert provider.get_instance_ip() == "10.138.0.2"
            assert provider.get_instance_ip(1) == "10.10.0.7"
            assert provider.get_instance_name() == "consul-server-1"
            assert provider.get_project_id() == "my-project"
            assert provider.get_region() == "us-west1"
            assert provider.get_custom_value("cluster-size") == "3"

    def test_transport_failure_raises(self, provider):
        """A connection error is surfaced, not retried."""
        with patch("requests.get", side_effect=requests.ConnectionError("refused")) as mock_get:
            with pytest.raises(MetadataResolutionError, match="instance/name"):
                provider.get_instance_name()
        assert mock_get.call_count == 1

    def test_http_error_raises(self, provider):
        with patch("requests.get", side_effect=fake_get({})):
            with pytest.raises(MetadataResolutionError):
                provider.get_project_id()

    def test_empty_body_raises(self, provider):
        """An empty answer is an error, not an empty value."""
        with patch("requests.get", return_value=_response("  \n")):
            with pytest.raises(MetadataResolutionError, match="nothing"):
                provider.get_instance_name()


class TestResolveFacts:
    """Test MetadataProvider.resolve_facts."""

    def test_server_reads_cluster_size(self, provider):
        with patch("requests.get", side_effect=fake_get(METADATA)):
            facts = provider.resolve_facts(NodeRole.SERVER, "cluster-size")
        assert facts.expected_cluster_size == 3
        assert facts.self_ip == "10.138.0.2"
        assert facts.self_name == "consul-server-1"
        assert facts.region == "us-west1"
        assert facts.project_id == "my-project"

    def test_client_never_reads_cluster_size(self, provider):
        """Clients resolve facts even when no cluster size is published."""
        metadata = {k: v for k, v in METADATA.items() if "cluster-size" not in k}
        with patch("requests.get", side_effect=fake_get(metadata)) as mock_get:
            facts = provider.resolve_facts(NodeRole.CLIENT, "cluster-size")
        assert facts.expected_cluster_size is None
        urls = [c.args[0] for c in mock_get.call_args_list]
        assert not any("attributes" in u for u in urls)

    def test_non_integer_cluster_size(self, provider):
        metadata = dict(METADATA, **{"instance/attributes/cluster-size": "three"})
        with patch("requests.get", side_effect=fake_get(metadata)):
            with pytest.raises(MetadataResolutionError, match="not an integer"):
                provider.resolve_facts(NodeRole.SERVER, "cluster-size")

    def test_zero_cluster_size(self, provider):
        metadata = dict(METADATA, **{"instance/attributes/cluster-size": "0"})
        with patch("requests.get", side_effect=fake_get(metadata)):
            with pytest.raises(MetadataResolutionError, match="positive"):
                provider.resolve_facts(NodeRole.SERVER, "cluster-size")

    def test_interface_index(self, provider):
        with patch("requests.get", side_effect=fake_get(METADATA)):
            facts = provider.resolve_facts(NodeRole.CLIENT, "cluster-size", interface=1)
        assert facts.self_ip == "10.10.0.7"


class TestProviderFactory:
    """Test get_provider."""

    def test_gce_and_alias(self):
        assert isinstance(get_provider("gce"), GCEMetadataProvider)
        assert isinstance(get_provider("google"), GCEMetadataProvider)

    def test_default_from_settings(self):
        assert get_provider().name == "gce"

    def test_unknown_provider(self):
        with pytest.raises(FatalConfigError, match="Unknown metadata provider"):
            get_provider("azure")
