"""Quickstart examples for aumai-fakekit.

Run this file directly to verify your installation and see the recorders in action:

    python examples/quickstart.py

Each demo function is self-contained and demonstrates a distinct feature.
"""

from __future__ import annotations

from typing import Protocol

from aumai_fakekit import (
    ArrangementConfig,
    CallRecorder,
    MemberSpec,
    PropertyRecorder,
    ReturnValueResolver,
    StubSpec,
    UnarrangedMockError,
    build_recorders,
    reset_all,
)


# ---------------------------------------------------------------------------
# A small system under test, its dependency and a hand-written fake
# ---------------------------------------------------------------------------


class Heater(Protocol):
    power: float

    def temperature(self, unit: str) -> float: ...

    def turn_on(self) -> None: ...


class Thermostat:
    """Keeps a room at its target temperature using a heater."""

    def __init__(self, heater: Heater, target: float) -> None:
        self.heater = heater
        self.target = target

    def regulate(self) -> None:
        if self.heater.temperature("celsius") < self.target:
            self.heater.turn_on()
            self.heater.power = 0.8


class HeaterFake:
    def __init__(self) -> None:
        self.temperature_func = ReturnValueResolver("temperature(unit)")
        self.turn_on_func = CallRecorder("turn_on()")
        self.power_property = PropertyRecorder("power")

    def temperature(self, unit: str) -> float:
        return self.temperature_func.record_call_and_return(unit)

    def turn_on(self) -> None:
        self.turn_on_func.record_call_and_maybe_fail()

    @property
    def power(self) -> float:
        return self.power_property.get()

    @power.setter
    def power(self, value: float) -> None:
        self.power_property.set(value)


# ---------------------------------------------------------------------------
# Demo 1: Recording calls and stubbing return values
# ---------------------------------------------------------------------------

def demo_recording() -> None:
    """Arrange a return value, exercise the system under test, inspect the fake."""
    print("\n--- Demo 1: Recording ---")

    heater = HeaterFake()
    heater.temperature_func.returns(17.5)

    Thermostat(heater, target=21.0).regulate()

    print(f"  temperature() called {heater.temperature_func.call_count} time(s)")
    print(f"  last unit: {heater.temperature_func.last_argument}")
    print(f"  heater turned on: {heater.turn_on_func.called_once}")
    print(f"  power written: {heater.power_property.has_been_written} "
          f"({heater.power_property.current_value})")


# ---------------------------------------------------------------------------
# Demo 2: Ordered conditional stubs
# ---------------------------------------------------------------------------

def demo_conditional_stubs() -> None:
    """The first stub whose condition matches wins; the default catches the rest."""
    print("\n--- Demo 2: Conditional Stubs ---")

    temperature = ReturnValueResolver("temperature(unit)")
    temperature.returns(63.5, when=lambda unit: unit == "fahrenheit")
    temperature.returns(17.5, when=lambda unit: unit == "celsius")
    temperature.default_value = 290.65

    for unit in ("celsius", "fahrenheit", "kelvin"):
        print(f"  {unit}: {temperature.record_call_and_return(unit)}")


# ---------------------------------------------------------------------------
# Demo 3: Injected failures and unarranged access
# ---------------------------------------------------------------------------

def demo_failures() -> None:
    """Inject a failure, then show what happens when a fake was never arranged."""
    print("\n--- Demo 3: Failures ---")

    heater = HeaterFake()
    heater.temperature_func.returns(10.0)
    heater.turn_on_func.configure_failure(RuntimeError("breaker tripped"))

    try:
        Thermostat(heater, target=21.0).regulate()
    except RuntimeError as exc:
        print(f"  Caught injected failure: {exc}")
    print(f"  turn_on() still recorded: {heater.turn_on_func.called}")

    reset_all(heater)
    try:
        Thermostat(heater, target=21.0).regulate()
    except UnarrangedMockError as exc:
        print(f"  After reset the fake is unarranged: {exc}")


# ---------------------------------------------------------------------------
# Demo 4: Declarative arrangement
# ---------------------------------------------------------------------------

def demo_declarative() -> None:
    """Build arranged recorders from a config model (or a YAML/JSON file)."""
    print("\n--- Demo 4: Declarative Arrangement ---")

    config = ArrangementConfig(
        members=[
            MemberSpec(
                name="lookup(query)",
                stubs=[StubSpec(value={"id": 42}, when={"key": "answer"})],
                default=None,
            ),
            MemberSpec(name="capacity", kind="property", value=90.0),
        ]
    )
    recorders = build_recorders(config)

    lookup = recorders["lookup(query)"]
    print(f"  lookup(answer): {lookup.record_call_and_return({'key': 'answer'})}")
    print(f"  lookup(other):  {lookup.record_call_and_return({'key': 'other'})}")
    print(f"  capacity: {recorders['capacity'].get()}")


# ---------------------------------------------------------------------------
# Main: run all demos
# ---------------------------------------------------------------------------

def main() -> None:
    """Run all quickstart demos in sequence."""
    print("=" * 60)
    print("aumai-fakekit quickstart demos")
    print("=" * 60)

    demo_recording()
    demo_conditional_stubs()
    demo_failures()
    demo_declarative()

    print("\n" + "=" * 60)
    print("All demos completed successfully.")
    print("=" * 60)


if __name__ == "__main__":
    main()
