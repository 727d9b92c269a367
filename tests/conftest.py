"""Shared pytest fixtures for aumai-fakekit tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import pytest
import yaml

from aumai_fakekit.core import CallRecorder, PropertyRecorder, ReturnValueResolver


# ---------------------------------------------------------------------------
# Example domain under test
# ---------------------------------------------------------------------------


class Engine(Protocol):
    def turn_on(self) -> None: ...

    def turn_off(self) -> None: ...

    @property
    def is_on(self) -> bool: ...

    def set_speed(self, value: float) -> None: ...

    def current_speed(self, unit: str) -> float: ...


class Battery(Protocol):
    @property
    def capacity(self) -> float: ...  # kWh

    @property
    def current_level(self) -> float: ...  # 0..1


class Foo(Protocol):
    baz: int

    def do_something(self, arg: str) -> int: ...


class Car:
    AVERAGE_CONSUMPTION_PER_KM = 0.18  # kWh
    MAX_SPEED = 180.0
    KM_PER_MILE = 1.609344

    def __init__(self, engine: Engine, battery: Battery) -> None:
        self._engine = engine
        self._battery = battery

    def turn_on(self) -> None:
        self._engine.turn_on()

    def accelerate(self) -> None:
        speed = self._engine.current_speed("km/h")
        new_speed = min(speed + 5.0, self.MAX_SPEED)
        if new_speed > speed:
            self._engine.set_speed(new_speed)

    def remaining_range(self, unit: str = "km") -> float:
        energy = self._battery.capacity * self._battery.current_level
        range_km = energy / self.AVERAGE_CONSUMPTION_PER_KM
        return range_km / self.KM_PER_MILE if unit == "mi" else range_km


class Bar:
    def __init__(self, foo: Foo) -> None:
        self.foo = foo

    def do_something_with_foo(self) -> int:
        return self.foo.do_something("abc") * self.foo.baz


# ---------------------------------------------------------------------------
# Hand-written fakes
# ---------------------------------------------------------------------------


class EngineFake:
    def __init__(self) -> None:
        self.turn_on_func = CallRecorder("turn_on()")
        self.turn_off_func = CallRecorder("turn_off()")
        self.is_on_property = PropertyRecorder("is_on")
        self.set_speed_func = CallRecorder("set_speed(value)")
        self.current_speed_func = ReturnValueResolver("current_speed(unit)")

    def turn_on(self) -> None:
        self.turn_on_func.record_call_and_maybe_fail()

    def turn_off(self) -> None:
        self.turn_off_func.record_call()

    @property
    def is_on(self) -> bool:
        return self.is_on_property.get()

    def set_speed(self, value: float) -> None:
        self.set_speed_func.record_call(value)

    def current_speed(self, unit: str) -> float:
        return self.current_speed_func.record_call_and_return(unit)


class BatteryFake:
    def __init__(self) -> None:
        self.capacity_property = PropertyRecorder("capacity")
        self.current_level_property = PropertyRecorder("current_level")

    @property
    def capacity(self) -> float:
        return self.capacity_property.get()

    @property
    def current_level(self) -> float:
        return self.current_level_property.get()


class FooFake:
    def __init__(self) -> None:
        self.baz_property = PropertyRecorder("baz")
        self.do_something_func = ReturnValueResolver("do_something(arg)")

    @property
    def baz(self) -> int:
        return self.baz_property.get()

    @baz.setter
    def baz(self, value: int) -> None:
        self.baz_property.set(value)

    def do_something(self, arg: str) -> int:
        return self.do_something_func.record_call_and_return(arg)


# ---------------------------------------------------------------------------
# Recorder fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def call_recorder() -> CallRecorder:
    """A named recorder for a single-parameter function."""
    return CallRecorder("test(foo)")


@pytest.fixture()
def resolver() -> ReturnValueResolver:
    """A named resolver mapping a string argument to an int."""
    return ReturnValueResolver("test(foo)")


@pytest.fixture()
def prop() -> PropertyRecorder:
    """A named property recorder."""
    return PropertyRecorder("test")


# ---------------------------------------------------------------------------
# Fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine_fake() -> EngineFake:
    return EngineFake()


@pytest.fixture()
def battery_fake() -> BatteryFake:
    return BatteryFake()


@pytest.fixture()
def foo_fake() -> FooFake:
    return FooFake()


@pytest.fixture()
def car(engine_fake: EngineFake, battery_fake: BatteryFake) -> Car:
    """A Car wired to fake engine and battery."""
    return Car(engine_fake, battery_fake)


@pytest.fixture()
def bar(foo_fake: FooFake) -> Bar:
    return Bar(foo_fake)


# ---------------------------------------------------------------------------
# File-based arrangement fixtures (YAML & JSON)
# ---------------------------------------------------------------------------


def _arrangement_dict() -> dict[str, Any]:
    """Return a raw dict representing a small arrangement."""
    return {
        "members": [
            {
                "name": "do_something(arg)",
                "kind": "returning",
                "stubs": [
                    {"value": 66, "when": "foo"},
                    {"value": 42, "when": "bar"},
                ],
            },
            {
                "name": "lookup(query)",
                "kind": "returning",
                "default": 0,
                "stubs": [{"value": 7, "when": {"key": "seven"}}],
            },
            {"name": "turn_on()", "kind": "function", "failure": "out of gas"},
            {"name": "turn_off()", "kind": "function"},
            {"name": "capacity", "kind": "property", "value": 90.0},
            {"name": "current_level", "kind": "property"},
        ],
    }


@pytest.fixture()
def arrangement_dict() -> dict[str, Any]:
    return _arrangement_dict()


@pytest.fixture()
def yaml_config_file(tmp_path: Path) -> Path:
    """A temporary YAML arrangement file."""
    config_path = tmp_path / "mocks.yaml"
    config_path.write_text(
        yaml.dump(_arrangement_dict(), default_flow_style=False),
        encoding="utf-8",
    )
    return config_path


@pytest.fixture()
def json_config_file(tmp_path: Path) -> Path:
    """A temporary JSON arrangement file."""
    config_path = tmp_path / "mocks.json"
    config_path.write_text(
        json.dumps(_arrangement_dict()),
        encoding="utf-8",
    )
    return config_path
