"""Unit tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from sixfigure.config import (
    AdvancedConfig,
    AppConfig,
    ConfigurationError,
    CurrencyPatternConfig,
    RepairConfig,
    SalaryConfig,
    SourceConfig,
    load_config,
    load_environment_config,
)
from sixfigure.config.environment import DEFAULT_DATABASE_URL
from sixfigure.config.validators import check_for_warnings

VALID_CONFIG = """
sources:
  - name: Example Co
    type: greenhouse
    identifier: exampleco
    country_code: us
  - name: Another Co
    type: lever
    identifier: anotherco

salary:
  market_floors:
    inr: 1500000
  country_currency:
    pl: pln
  local_thresholds:
    PL: 350000

repair:
  policies:
    - name: greenhouse-cents
      source_filter: Greenhouse
      redetect_currency: false
      limit: 500
  currency_patterns:
    - pattern: '\\bPLN\\b|zł'
      currency: pln

logging:
  level: DEBUG
  format: json
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty directory with no config env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "LOG_LEVEL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path: Path, content: str, name: str = "config.yaml") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_valid_config(self, tmp_path):
        app_config, env_config = load_config(write_config(tmp_path, VALID_CONFIG))

        assert [s.identifier for s in app_config.sources] == ["exampleco", "anotherco"]
        assert app_config.sources[0].country_code == "US"
        assert app_config.salary.market_floors == {"INR": 1500000}
        assert app_config.salary.country_currency == {"PL": "PLN"}
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_salary_overrides_reach_tables(self, tmp_path):
        app_config, _ = load_config(write_config(tmp_path, VALID_CONFIG))
        tables = app_config.salary.build_tables()

        assert tables.market_floor("INR") == 1500000
        assert tables.currency_for_country("PL") == "PLN"

    def test_config_yaml_in_working_directory_is_found(self, tmp_path):
        write_config(tmp_path, VALID_CONFIG)
        app_config, _ = load_config()
        assert len(app_config.sources) == 2

    def test_config_directory_fallback(self, tmp_path):
        (tmp_path / "config").mkdir()
        write_config(tmp_path / "config", VALID_CONFIG)
        app_config, _ = load_config()
        assert len(app_config.sources) == 2

    def test_defaults_without_a_file(self):
        with pytest.warns(UserWarning, match="No sources configured"):
            app_config, env_config = load_config()

        assert app_config.sources == []
        assert app_config.repair.get_policy("default") is not None
        assert env_config.environment == "local"

    def test_required_file_missing(self):
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            load_config(require_file=True)

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Specified configuration file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "sources:\n  - name: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_empty_file_uses_defaults(self, tmp_path):
        path = write_config(tmp_path, "")
        with pytest.warns(UserWarning):
            app_config, _ = load_config(path)
        assert app_config.sources == []

    def test_missing_field_is_reported_with_path(self, tmp_path):
        path = write_config(tmp_path, "sources:\n  - name: Example\n    type: lever\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "Missing required field: sources -> 0 -> identifier" in exc_info.value.errors

    def test_unknown_ats_type(self, tmp_path):
        path = write_config(tmp_path, "sources:\n  - name: Example\n    type: workday\n    identifier: ex\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert any("sources -> 0 -> type" in error for error in exc_info.value.errors)

    def test_unordered_bands_are_rejected(self, tmp_path):
        content = """
sources:
  - {name: Example, type: lever, identifier: ex}
salary:
  country_bands:
    PL:
      - {id: "200-299", label: "b", min: 700000}
      - {id: "100-199", label: "a", min: 350000}
"""
        with pytest.raises(ConfigurationError, match="ascending"):
            load_config(write_config(tmp_path, content))


class TestWarnings:
    def test_disabled_source(self):
        warnings = check_for_warnings({"sources": [{"name": "Old", "enabled": False}]})
        assert warnings == ["Source 'Old' is disabled and will be skipped"]

    def test_large_max_jobs(self):
        warnings = check_for_warnings({"sources": [{"name": "A"}], "advanced": {"max_jobs_per_source": 10000}})
        assert "10000" in warnings[0]

    def test_currency_without_fx_rate(self):
        config = {"sources": [{"name": "A"}], "repair": {"currency_patterns": [{"pattern": "x", "currency": "xyz"}]}}
        assert "XYZ" in check_for_warnings(config)[0]

    def test_display_ceiling_below_floor(self):
        config = {"sources": [{"name": "A"}], "salary": {"validity_floor": 60000, "display_ceiling": 50000}}
        assert "High salary role" in check_for_warnings(config)[0]

    def test_clean_config_has_no_warnings(self):
        assert check_for_warnings({"sources": [{"name": "A"}]}) == []


class TestEnvironmentConfig:
    """Tests for load_environment_config()."""

    def test_defaults(self):
        env_config = load_environment_config()

        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None
        assert env_config.environment == "local"

    def test_values_are_read(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "production")

        env_config = load_environment_config()

        assert env_config.database_url == "sqlite:///:memory:"
        assert env_config.log_level == "DEBUG"
        assert env_config.environment == "production"

    def test_invalid_values_are_collected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        monkeypatch.setenv("DATABASE_URL", "jobs.db")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert len(exc_info.value.errors) == 2
        assert "Invalid LOG_LEVEL" in str(exc_info.value)


class TestModels:
    def test_source_config_strips_and_validates(self):
        source = SourceConfig(name="  Example  ", type="ashby", identifier=" ex ", country_code=" gb ")
        assert (source.name, source.identifier, source.country_code) == ("Example", "ex", "GB")

    @pytest.mark.parametrize("country", ["GBR", "1A"])
    def test_source_config_rejects_bad_country(self, country):
        with pytest.raises(ValidationError):
            SourceConfig(name="Example", type="ashby", identifier="ex", country_code=country)

    def test_duplicate_sources_rejected(self):
        source = {"name": "Example", "type": "lever", "identifier": "ex"}
        with pytest.raises(ValidationError, match="Duplicate source"):
            AppConfig(sources=[source, source])

    def test_enabled_sources_and_lookup(self):
        config = AppConfig(
            sources=[
                {"name": "A", "type": "lever", "identifier": "a"},
                {"name": "B", "type": "lever", "identifier": "b", "enabled": False},
            ]
        )
        assert [s.identifier for s in config.get_enabled_sources()] == ["a"]
        assert config.get_source_by_identifier("b").name == "B"
        assert config.get_source_by_identifier("c") is None

    @pytest.mark.parametrize("timeout", [4, 301])
    def test_advanced_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            AdvancedConfig(http_request_timeout=timeout)

    def test_salary_config_rejects_empty_keys(self):
        with pytest.raises(ValidationError):
            SalaryConfig(market_floors={" ": 10})


class TestRepairConfig:
    """Tests for repair policies and currency patterns."""

    def test_default_policy_always_available(self):
        config = RepairConfig(policies=[{"name": "strict", "min_threshold": 60000}])

        assert config.get_policy("strict").min_threshold == 60000
        assert config.get_policy("default").name == "default"
        assert config.get_policy("unknown") is None

    def test_duplicate_policy_names(self):
        with pytest.raises(ValidationError, match="Duplicate repair policy"):
            RepairConfig(policies=[{"name": "a"}, {"name": "a"}])

    def test_configured_patterns_come_first(self):
        config = RepairConfig(currency_patterns=[{"pattern": r"\bPLN\b", "currency": "pln"}])
        patterns = config.patterns()

        assert patterns[0].currency == "PLN"
        assert patterns[0].pattern.search("20 000 pln")
        assert len(patterns) > 1

    def test_invalid_pattern(self):
        with pytest.raises(ValidationError, match="Invalid currency pattern"):
            CurrencyPatternConfig(pattern="(unclosed", currency="PLN")

    def test_policy_from_yaml(self, tmp_path):
        app_config, _ = load_config(write_config(tmp_path, VALID_CONFIG))
        policy = app_config.repair.get_policy("greenhouse-cents")

        assert policy.source_filter == "greenhouse"
        assert policy.limit == 500
        assert not policy.redetect_currency
        assert app_config.repair.patterns()[0].currency == "PLN"


class TestConfigurationError:
    def test_message_lists_errors_and_suggestions(self):
        error = ConfigurationError("Bad config", errors=["one", "two"], suggestions=["fix it"])
        text = str(error)

        assert text.startswith("Bad config")
        assert "  1. one" in text
        assert "  2. two" in text
        assert "  - fix it" in text
