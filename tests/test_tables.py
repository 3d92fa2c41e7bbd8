"""Unit tests for SalaryTables and configuration overrides."""

import dataclasses

import pytest

from sixfigure.config.models import SalaryConfig
from sixfigure.salary import DEFAULT_TABLES, SalaryBand, SalaryTables


class TestSalaryTables:
    def test_default_is_shared_instance(self):
        assert SalaryTables.default() is DEFAULT_TABLES

    def test_tables_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_TABLES.validity_floor = 1

    def test_market_floor_never_below_validity_floor(self):
        assert DEFAULT_TABLES.market_floor("INR") == 1_000_000
        assert DEFAULT_TABLES.market_floor("USD") == 50_000
        assert DEFAULT_TABLES.market_floor(None) == 50_000

    def test_display_ceiling_for(self):
        assert DEFAULT_TABLES.display_ceiling_for("sek") == 20_000_000
        assert DEFAULT_TABLES.display_ceiling_for("USD") == 1_500_000
        assert DEFAULT_TABLES.display_ceiling_for(None) == 1_500_000

    def test_with_overrides_merges_and_leaves_original(self):
        tables = DEFAULT_TABLES.with_overrides(country_currency={"xx": "XXX"}, validity_floor=60_000)

        assert tables.currency_for_country("XX") == "XXX"
        assert tables.currency_for_country("GB") == "GBP"
        assert tables.validity_floor == 60_000
        assert DEFAULT_TABLES.currency_for_country("XX") is None
        assert DEFAULT_TABLES.validity_floor == 50_000

    def test_empty_overrides_keep_mappings(self):
        tables = DEFAULT_TABLES.with_overrides()
        assert tables.country_bands is DEFAULT_TABLES.country_bands
        assert tables == DEFAULT_TABLES


class TestSalaryConfigBuildTables:
    def test_defaults_match_built_in_tables(self):
        assert SalaryConfig().build_tables() == DEFAULT_TABLES

    def test_overrides_reach_tables(self):
        config = SalaryConfig(
            validity_floor=40_000,
            display_ceiling=2_000_000,
            market_floors={"pln": 150_000},
            country_currency={"pl": "pln"},
            country_bands={
                "pl": [
                    SalaryBand(id="100-199", label="zł350k+", min=350_000, max=699_999),
                    SalaryBand(id="200-299", label="zł700k+", min=700_000),
                ]
            },
        )
        tables = config.build_tables()

        assert tables.validity_floor == 40_000
        assert tables.display_ceiling == 2_000_000
        assert tables.market_floor("PLN") == 150_000
        assert tables.currency_for_country("PL") == "PLN"
        assert tables.bands_for_country("PL")[0].min == 350_000

    def test_bands_must_ascend(self):
        with pytest.raises(ValueError, match="ascending"):
            SalaryConfig(
                country_bands={
                    "PL": [
                        {"id": "200-299", "label": "b", "min": 700_000},
                        {"id": "100-199", "label": "a", "min": 350_000},
                    ]
                }
            )

    def test_floor_below_ceiling(self):
        with pytest.raises(ValueError, match="validity_floor"):
            SalaryConfig(validity_floor=6_000_000)
