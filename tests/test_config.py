"""Tests for configuration adapter."""

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest

from tcdd_routes.adapters.config import AppConfig, RoutingPolicyLoader
from tcdd_routes.adapters.config.routing_policy_loader import DEFAULT_MAJOR_HUBS
from tcdd_routes.domain.models.search_options import SearchMode

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config.example.toml"


def write_toml(content: str) -> str:
    with NamedTemporaryFile(mode="w", suffix=".toml", delete=False, encoding="utf-8") as f:
        f.write(content)
        return f.name


def test_config_loads_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    monkeypatch.delenv("TCDD_AUTH_TOKEN", raising=False)

    config = AppConfig(_env_file=None)

    assert config.tcdd_auth_token is None
    assert config.search_mode == "direct"
    assert config.max_connections == 1
    assert config.min_transfer_minutes == 45
    assert config.max_transfer_minutes == 480
    assert config.result_limit is None
    assert config.show_sold_out is False


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("TCDD_AUTH_TOKEN", "token-from-env")
    monkeypatch.setenv("SEARCH_MODE", "FULL")
    monkeypatch.setenv("MAX_CONNECTIONS", "2")

    config = AppConfig(_env_file=None)

    assert config.tcdd_auth_token == "token-from-env"
    assert config.search_mode == "full"
    assert config.max_connections == 2


def test_config_validates_search_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given an unknown search mode, when loading config, then validation error is raised."""
    monkeypatch.setenv("SEARCH_MODE", "teleport")

    with pytest.raises(ValueError, match="search_mode must be one of"):
        AppConfig(_env_file=None)


def test_config_validates_transfer_window() -> None:
    """Given min above max transfer time, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="min_transfer_minutes must be between"):
        AppConfig(_env_file=None, min_transfer_minutes=90, max_transfer_minutes=60)


def test_config_validates_positive_limits() -> None:
    """Given a zero fan-out limit, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="must be at least 1"):
        AppConfig(_env_file=None, hub_fanout_limit=0)


def test_toml_overrides_api_and_search_settings() -> None:
    """Given [api] and [search] tables, when loading TOML, then settings are overridden."""
    temp_path = write_toml(
        """
[api]
sleep_ms_between_calls = 500

[search]
search_mode = "Same-Train"
min_transfer_minutes = 30
result_limit = 5
"""
    )
    try:
        config = AppConfig(_env_file=None, config_file=temp_path)
        data = config.load_toml()

        assert data["api"]["sleep_ms_between_calls"] == 500
        assert config.sleep_ms_between_calls == 500
        assert config.search_mode == "same-train"
        options = config.search_options()
        assert options.mode is SearchMode.WITH_SAME_TRAIN
        assert options.min_transfer_minutes == 30
        assert options.result_limit == 5
    finally:
        Path(temp_path).unlink()


def test_toml_with_inverted_transfer_window_is_rejected() -> None:
    """Given a TOML window with min above max, when loading TOML, then ValueError is raised."""
    temp_path = write_toml("[search]\nmin_transfer_minutes = 600\n")
    try:
        config = AppConfig(_env_file=None, config_file=temp_path)
        with pytest.raises(ValueError, match="min_transfer_minutes must be between"):
            config.load_toml()
    finally:
        Path(temp_path).unlink()


def test_toml_limits_go_through_field_validation() -> None:
    """Given a TOML concurrency cap of zero, when loading TOML, then the settings are left unchanged."""
    temp_path = write_toml("[api]\nmax_concurrent_requests = 0\n[search]\nsearch_mode = 'FULL'\n")
    try:
        config = AppConfig(_env_file=None, config_file=temp_path)
        with pytest.raises(ValueError, match="must be at least 1"):
            config.load_toml()
        assert config.max_concurrent_requests == 4
        assert config.search_mode == "direct"
    finally:
        Path(temp_path).unlink()


def test_toml_search_mode_is_normalized() -> None:
    """Given an upper-case TOML search mode, when loading TOML, then it is stored lower-case."""
    temp_path = write_toml("[search]\nsearch_mode = 'SAME-TRAIN'\nhub_fanout_limit = 3\n")
    try:
        config = AppConfig(_env_file=None, config_file=temp_path)
        config.load_toml()
        assert config.search_mode == "same-train"
        assert config.hub_fanout_limit == 3
    finally:
        Path(temp_path).unlink()


def test_config_raises_error_when_file_not_found() -> None:
    """Given non-existent config file, when loading config, then FileNotFoundError is raised."""
    config = AppConfig(_env_file=None, config_file="nonexistent.toml")

    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        config.load_toml()


def test_config_without_file_returns_no_data() -> None:
    """Given config_file is None, when loading TOML, then no data is returned."""
    config = AppConfig(_env_file=None, config_file=None)

    assert config.load_toml() == {}


class TestRoutingPolicyLoader:
    """Tests for RoutingPolicyLoader."""

    def test_defaults_reject_istanbul_detour(self) -> None:
        """Given the built-in policy, when routing Izmit to Ankara via Pendik, then it is illogical."""
        policy = RoutingPolicyLoader.load()

        assert policy.major_hubs == DEFAULT_MAJOR_HUBS
        assert policy.is_illogical(1135, 48, 98) is True
        assert policy.is_illogical(98, 1325, 180) is True
        assert policy.is_illogical(98, 87, 1135) is False

    def test_example_file_matches_defaults(self) -> None:
        """Given the example config, when loading its routing table, then it equals the defaults."""
        config = AppConfig(_env_file=None, config_file=str(EXAMPLE_CONFIG))

        policy = RoutingPolicyLoader.load(config.load_toml().get("routing"))
        defaults = RoutingPolicyLoader.load()

        assert set(policy.detours) == set(defaults.detours)
        assert policy.major_hubs == defaults.major_hubs
        assert policy.station_groups == defaults.station_groups

    def test_custom_detours_expand_lists(self) -> None:
        """Given list-valued from and to, when loading, then one rule per pair is created."""
        policy = RoutingPolicyLoader.load(
            {"detours": [{"from": [1, 2], "via": 3, "to": [4, 5]}], "group_detours": []}
        )

        assert len(policy.detours) == 4
        assert policy.is_illogical(2, 3, 5) is True
        assert policy.is_illogical(2, 6, 5) is False

    def test_group_detours_use_station_groups(self) -> None:
        """Given named groups, when a route hits them, then it is illogical."""
        policy = RoutingPolicyLoader.load(
            {
                "detours": [],
                "station_groups": {"west": [10, 11], "east": [30]},
                "group_detours": [{"from": "east", "via": "west", "to": "east"}],
            }
        )

        assert policy.is_illogical(30, 11, 30) is True
        assert policy.is_illogical(30, 12, 30) is False

    def test_detour_without_via_is_rejected(self) -> None:
        """Given a detour entry missing 'via', when loading, then ValueError is raised."""
        with pytest.raises(ValueError, match="needs 'from', 'via' and 'to'"):
            RoutingPolicyLoader.load({"detours": [{"from": 1, "to": 2}]})
