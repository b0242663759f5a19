"""Unit tests for aircraft parsing.

Pure function tests - no mocks needed.
"""

import pytest

from flight_alerts.core.aircraft import (
    Aircraft,
    AircraftMetadata,
    EnrichedAircraft,
    meters_to_feet,
    ms_to_knots,
    parse_metadata,
    parse_state_vector,
    parse_states,
)


def make_state(**overrides):
    """Build a 17-field OpenSky state vector."""
    state = {
        "icao24": "4CA7B4",
        "callsign": "EIN123  ",
        "origin_country": "Ireland",
        "time_position": 1700000000,
        "last_contact": 1700000001,
        "longitude": -6.2871,
        "latitude": 53.3486,
        "baro_altitude": 10668.0,
        "on_ground": False,
        "velocity": 230.5,
        "true_track": 92.0,
        "vertical_rate": 0.0,
        "sensors": None,
        "geo_altitude": 10800.0,
        "squawk": "4521",
        "spi": False,
        "position_source": 0,
    }
    state.update(overrides)
    return list(state.values())


class TestParseStateVector:
    """Tests for parse_state_vector()."""

    def test_parses_all_fields(self):
        """Should map positional fields onto Aircraft."""
        aircraft = parse_state_vector(make_state())

        assert aircraft == Aircraft(
            icao24="4ca7b4",
            callsign="EIN123",
            origin_country="Ireland",
            latitude=53.3486,
            longitude=-6.2871,
            baro_altitude=10668.0,
            geo_altitude=10800.0,
            on_ground=False,
            velocity=230.5,
            true_track=92.0,
            vertical_rate=0.0,
            squawk="4521",
        )

    def test_strips_callsign_padding(self):
        """Callsigns are padded to 8 characters upstream."""
        aircraft = parse_state_vector(make_state(callsign="RYR4TG  "))
        assert aircraft.callsign == "RYR4TG"

    def test_missing_callsign_becomes_empty(self):
        """A null callsign is an empty string."""
        aircraft = parse_state_vector(make_state(callsign=None))
        assert aircraft.callsign == ""
        assert aircraft.label == "4ca7b4"

    def test_missing_position_returns_none(self):
        """Aircraft without a position cannot be placed."""
        assert parse_state_vector(make_state(latitude=None)) is None
        assert parse_state_vector(make_state(longitude=None)) is None

    def test_short_array_returns_none(self):
        """Arrays with fewer than 17 fields are rejected."""
        assert parse_state_vector(make_state()[:10]) is None
        assert parse_state_vector([]) is None

    def test_missing_icao24_returns_none(self):
        """The identifier is required."""
        assert parse_state_vector(make_state(icao24=None)) is None

    def test_bad_number_returns_none(self):
        """Non-numeric coordinates are rejected."""
        assert parse_state_vector(make_state(latitude="north")) is None

    def test_optional_fields_may_be_null(self):
        """Altitude, speed and heading may be missing."""
        aircraft = parse_state_vector(make_state(
            baro_altitude=None,
            geo_altitude=None,
            velocity=None,
            true_track=None,
        ))

        assert aircraft is not None
        assert aircraft.altitude_m is None
        assert aircraft.altitude_feet is None


class TestParseStates:
    """Tests for parse_states()."""

    def test_parses_airborne_aircraft(self):
        """Should return airborne aircraft in response order."""
        payload = {
            "time": 1700000000,
            "states": [
                make_state(icao24="aaaaaa"),
                make_state(icao24="bbbbbb"),
            ],
        }

        result = parse_states(payload)

        assert [a.icao24 for a in result] == ["aaaaaa", "bbbbbb"]

    def test_excludes_aircraft_on_ground(self):
        """Aircraft on the ground are dropped."""
        payload = {
            "states": [
                make_state(icao24="ground", on_ground=True),
                make_state(icao24="flying"),
            ],
        }

        result = parse_states(payload)

        assert [a.icao24 for a in result] == ["flying"]

    def test_excludes_aircraft_without_position(self):
        """Aircraft without coordinates are dropped."""
        payload = {"states": [make_state(latitude=None)]}
        assert parse_states(payload) == []

    def test_null_states(self):
        """OpenSky returns states=null when the box is empty."""
        assert parse_states({"time": 1700000000, "states": None}) == []

    def test_missing_states(self):
        """Missing states key returns empty list."""
        assert parse_states({}) == []

    def test_states_not_a_list(self):
        """Unexpected states shape returns empty list."""
        assert parse_states({"states": {"oops": 1}}) == []


class TestAircraftProperties:
    """Tests for Aircraft derived properties."""

    def test_altitude_prefers_barometric(self):
        """Barometric altitude is used when present."""
        aircraft = parse_state_vector(make_state())
        assert aircraft.altitude_m == 10668.0
        assert aircraft.altitude_feet == 35000

    def test_altitude_falls_back_to_geometric(self):
        """Geometric altitude is used when barometric is missing."""
        aircraft = parse_state_vector(make_state(baro_altitude=None))
        assert aircraft.altitude_m == 10800.0

    def test_label_prefers_callsign(self):
        """Label is the callsign when there is one."""
        aircraft = parse_state_vector(make_state())
        assert aircraft.label == "EIN123"


class TestUnitConversions:
    """Tests for meters_to_feet() and ms_to_knots()."""

    def test_meters_to_feet(self):
        assert meters_to_feet(1000) == 3281
        assert meters_to_feet(10668) == 35000

    def test_meters_to_feet_unknown(self):
        assert meters_to_feet(None) is None
        assert meters_to_feet(0) is None

    def test_ms_to_knots(self):
        assert ms_to_knots(100) == 194
        assert ms_to_knots(None) is None


class TestParseMetadata:
    """Tests for parse_metadata()."""

    def test_parses_fields(self):
        """Should map OpenSky metadata keys."""
        metadata = parse_metadata({
            "registration": "EI-DVM",
            "manufacturerName": "Airbus",
            "model": "A320 214",
            "typecode": "A320",
            "owner": "Aer Lingus",
        })

        assert metadata == AircraftMetadata(
            registration="EI-DVM",
            manufacturer_name="Airbus",
            model="A320 214",
            typecode="A320",
            owner="Aer Lingus",
        )

    def test_empty_strings_become_none(self):
        """OpenSky uses empty strings for unknown fields."""
        metadata = parse_metadata({"registration": "", "typecode": ""})

        assert metadata.registration is None
        assert metadata.typecode is None


class TestEnrichedAircraft:
    """Tests for EnrichedAircraft shortcuts."""

    @pytest.fixture
    def aircraft(self):
        return parse_state_vector(make_state())

    def test_with_metadata(self, aircraft):
        enriched = EnrichedAircraft(
            aircraft=aircraft,
            distance_miles=2.4,
            metadata=AircraftMetadata(typecode="A320", model="A320 214", registration="EI-DVM"),
        )

        assert enriched.typecode == "A320"
        assert enriched.model == "A320 214"
        assert enriched.registration == "EI-DVM"

    def test_without_metadata(self, aircraft):
        enriched = EnrichedAircraft(aircraft=aircraft, distance_miles=2.4)

        assert enriched.typecode is None
        assert enriched.model is None
        assert enriched.registration is None
