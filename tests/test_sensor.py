"""Test sensor entities against snapshots from the hub."""
from __future__ import annotations

import pytest

from custom_components.tide_conditions.data_schema import TideKind
from custom_components.tide_conditions.engine import ConditionsEngine
from custom_components.tide_conditions.hub import TideConditionsHub
from custom_components.tide_conditions.sensor import (
    SurfConditionSensor,
    TideConditionsSensor,
    TideLevelSensor,
    TidePoolSensor,
)

from .helpers import FakeSurfClient, FakeTideClient, at, make_config, make_spot, sample

HILO = (sample(8, 3.5, TideKind.HIGH), sample(14, 0.5, TideKind.LOW))


def _hub(spots=()):
    engine = ConditionsEngine(make_config(spots), FakeTideClient(high_low=HILO), FakeSurfClient())
    return TideConditionsHub(engine)


def test_base_sensor_is_abstract():
    """Only the concrete sensors know how to read a snapshot."""
    with pytest.raises(TypeError):
        TideConditionsSensor(_hub(), "Santa Cruz", "entry", "base")


async def test_sensors_read_snapshot():
    """Each sensor takes its state from its own part of the snapshot."""
    spot = make_spot("a")
    hub = _hub((spot,))
    snapshot = await hub.async_get_snapshot(at(11))

    level = TideLevelSensor(hub, "Santa Cruz", "entry")
    pools = TidePoolSensor(hub, "Santa Cruz", "entry")
    surf = SurfConditionSensor(hub, "Santa Cruz", "entry", spot)
    for sensor in (level, pools, surf):
        sensor._apply(snapshot)

    assert level.native_value == 3.5
    assert level.extra_state_attributes["source"] == "noaa_hilo"
    assert pools.native_value == "poor"
    assert surf.native_value == snapshot.surf_conditions[0].quality.value
    assert surf.unique_id == "entry_a_surf"
