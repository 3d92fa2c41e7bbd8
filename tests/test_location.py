"""Unit tests for location-based country inference."""

import pytest

from sixfigure.utils.location import infer_country_code


class TestInferCountryCode:
    @pytest.mark.parametrize(
        "location,expected",
        [
            ("San Francisco, CA", "US"),
            ("Austin, TX", "US"),
            ("Toronto, ON", "CA"),
            ("Toronto, Canada", "CA"),
            ("London, UK", "GB"),
            ("Berlin", "DE"),
            ("Remote - US", "US"),
            ("Hybrid (Amsterdam / Remote)", "NL"),
            ("Bengaluru, Karnataka, India", "IN"),
        ],
    )
    def test_known_locations(self, location, expected):
        assert infer_country_code(location) == expected

    @pytest.mark.parametrize("location", [None, "", "   ", "Remote", "Anywhere", "Work from home"])
    def test_remote_or_empty_locations_have_no_country(self, location):
        assert infer_country_code(location) is None

    def test_state_code_needs_a_city_before_it(self):
        assert infer_country_code("CA") is None
