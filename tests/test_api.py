"""Test upstream response parsing and HTTP error mapping."""
from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import aiohttp
import pytest

from custom_components.tide_conditions.api import (
    NoaaTidesClient,
    SurflineClient,
    parse_noaa_predictions,
    parse_surfline_rating,
    parse_surfline_tides,
    parse_surfline_wave,
    parse_surfline_wind,
)
from custom_components.tide_conditions.data_schema import TideKind
from custom_components.tide_conditions.exceptions import NetworkError, ParseError
from custom_components.tide_conditions.tide_series import merge_series

from .helpers import PDT, UTC, FakeResponse, FakeSession, at


def test_parse_noaa_hilo_predictions():
    """GMT times come out as UTC; H/L map to high/low."""
    body = {
        "predictions": [
            {"t": "2024-06-01 08:00", "v": "3.512", "type": "H"},
            {"t": "2024-06-01 14:06", "v": "-0.4", "type": "L"},
        ]
    }

    samples = parse_noaa_predictions(body)

    assert [s.kind for s in samples] == [TideKind.HIGH, TideKind.LOW]
    assert samples[0].timestamp == datetime(2024, 6, 1, 8, 0, tzinfo=UTC)
    assert samples[0].height == pytest.approx(3.512)
    assert samples[1].height == pytest.approx(-0.4)


def test_parse_noaa_skips_missing_heights():
    """Blank, missing and NaN heights are absent samples, never zero."""
    body = {
        "predictions": [
            {"t": "2024-06-01 08:00", "v": ""},
            {"t": "2024-06-01 08:06"},
            {"t": "2024-06-01 08:12", "v": "NaN"},
            {"t": "2024-06-01 08:18", "v": "2.0"},
            {"t": "not a time", "v": "2.1"},
        ]
    }

    samples = parse_noaa_predictions(body)

    assert len(samples) == 1
    assert samples[0].height == 2.0
    assert samples[0].kind == TideKind.UNSPECIFIED


def test_parse_noaa_error_body():
    """A NOAA error object is a parse failure."""
    with pytest.raises(ParseError):
        parse_noaa_predictions({"error": {"message": "No Predictions data was found."}})


@pytest.mark.parametrize("body", [[], "text", {"data": []}])
def test_parse_noaa_unexpected_shape(body):
    """Anything but an object with a predictions list is rejected."""
    with pytest.raises(ParseError):
        parse_noaa_predictions(body)


def test_parse_surfline_tides():
    """Epoch timestamps become UTC; entries without height are skipped."""
    noon = int(at(12).timestamp())
    body = {
        "data": {
            "tides": [
                {"timestamp": noon + 3600, "type": "NORMAL", "height": 2.2},
                {"timestamp": noon, "type": "HIGH", "height": 4.8},
                {"timestamp": noon + 7200, "type": "LOW"},
                {"type": "LOW", "height": 0.1},
            ]
        }
    }

    samples = parse_surfline_tides(body)

    assert [s.timestamp for s in samples] == [at(12), at(13)]
    assert samples[0].kind == TideKind.HIGH
    assert samples[1].kind == TideKind.UNSPECIFIED


def test_parse_surfline_tides_without_data():
    """A body without tides is an empty series, not an error."""
    assert parse_surfline_tides({"data": {}}) == ()
    assert parse_surfline_tides({}) == ()
    with pytest.raises(ParseError):
        parse_surfline_tides(["nope"])


def test_parse_surfline_wave_first_entry():
    """Only the first wave entry is used; missing fields stay None."""
    body = {
        "data": {
            "wave": [
                {
                    "surf": {"min": 2, "max": 3, "humanRelation": "Waist to chest"},
                    "swells": [{"height": 3.1, "period": 14, "direction": 285.5}],
                },
                {"surf": {"min": 9, "max": 10}},
            ]
        }
    }

    wave = parse_surfline_wave(body)

    assert wave.min_height == 2
    assert wave.max_height == 3
    assert wave.human_relation == "Waist to chest"
    assert wave.swell_period == 14
    assert wave.swell_direction == 285.5
    assert wave.optimal_score is None


def test_parse_surfline_wind_and_rating():
    """Wind and rating readings tolerate missing numbers."""
    wind = parse_surfline_wind({"data": {"wind": [{"speed": 7.4, "direction": 90}]}})
    rating = parse_surfline_rating({"data": {"rating": [{"rating": {"key": "FAIR", "value": 2}}]}})

    assert wind.speed == 7.4
    assert wind.gust is None
    assert rating.value == 2
    assert rating.key == "FAIR"
    assert parse_surfline_wind({"data": {"wind": []}}) is None
    assert parse_surfline_rating({"data": None}) is None


async def test_noaa_client_request_parameters():
    """Requests use MLLW, GMT and english units, starting at local midnight."""
    session = FakeSession(FakeResponse(body={"predictions": [{"t": "2024-06-01 02:00", "v": "1.0", "type": "L"}]}))
    client = NoaaTidesClient(session, "9413745", PDT)

    samples = await client.fetch_high_low(at(15))

    url, params = session.requests[0]
    assert params["station"] == "9413745"
    assert params["interval"] == "hilo"
    assert params["datum"] == "MLLW"
    assert params["time_zone"] == "gmt"
    assert params["units"] == "english"
    assert params["begin_date"] == "20240601 07:00"
    assert params["end_date"] == "20240603 07:00"
    assert len(samples) == 1


async def test_noaa_continuous_window():
    """The continuous fetch spans an hour either side of now at 6 minute interval."""
    session = FakeSession(FakeResponse(body={"predictions": []}))
    client = NoaaTidesClient(session, "9413745", UTC)

    await client.fetch_continuous(at(12))

    _, params = session.requests[0]
    assert params["interval"] == "6"
    assert params["begin_date"] == "20240601 11:00"
    assert params["end_date"] == "20240601 13:00"


async def test_non_200_is_network_error():
    """HTTP failures carry the status code."""
    session = FakeSession(FakeResponse(status=429, text="slow down"))
    client = SurflineClient(session)

    with pytest.raises(NetworkError) as err:
        await client.fetch_tides("spot-a")
    assert err.value.status == 429


async def test_transport_error_is_network_error():
    """aiohttp client errors surface as NetworkError."""
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
    client = NoaaTidesClient(session, "9413745", UTC)

    with pytest.raises(NetworkError):
        await client.fetch_chart_window(at(12))


async def test_undecodable_body_is_parse_error():
    """Bodies that are not JSON are parse failures."""
    session = FakeSession(FakeResponse(json_error=ValueError("Expecting value")))
    client = SurflineClient(session)

    with pytest.raises(ParseError):
        await client.fetch_wave("spot-a")


async def test_surfline_api_key_pass_through():
    """An API key is sent as accessToken; without one nothing is sent."""
    keyed = FakeSession(FakeResponse(body={"data": {"wind": []}}))
    anonymous = FakeSession(FakeResponse(body={"data": {"wind": []}}))

    await SurflineClient(keyed, api_key="secret").fetch_wind("spot-a")
    await SurflineClient(anonymous).fetch_wind("spot-a")

    assert keyed.requests[0][1]["accessToken"] == "secret"
    assert keyed.requests[0][1]["spotId"] == "spot-a"
    assert "accessToken" not in anonymous.requests[0][1]
    assert keyed.requests[0][0].endswith("/wind")


async def test_noaa_fall_back_hour_is_not_collapsed():
    """The 01:00-01:54 hour repeated on the wall clock survives as two distinct hours."""
    pacific = ZoneInfo("America/Los_Angeles")
    predictions = [
        {"t": f"2024-11-03 {hour:02d}:{minute:02d}", "v": str(1.0 + hour / 10)}
        for hour in (8, 9)
        for minute in range(0, 60, 6)
    ]
    session = FakeSession(FakeResponse(body={"predictions": predictions}))
    client = NoaaTidesClient(session, "9413745", pacific)

    samples = merge_series(await client.fetch_continuous(datetime(2024, 11, 3, 1, 30, tzinfo=pacific)))

    assert len(samples) == 20
    wall_clock = [s.timestamp.astimezone(pacific).strftime("%H:%M") for s in samples]
    assert wall_clock[:10] == wall_clock[10:]
    assert samples[0].timestamp == datetime(2024, 11, 3, 8, 0, tzinfo=UTC)
    assert session.requests[0][1]["time_zone"] == "gmt"
