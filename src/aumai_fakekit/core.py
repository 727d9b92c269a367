"""Core logic for aumai-fakekit: call, return-value and property recorders.

A hand-written fake owns one recorder per member of the interface it
implements and delegates each member to it::

    class FooFake(Foo):
        def __init__(self) -> None:
            self.do_something_func = ReturnValueResolver("do_something(arg)")
            self.baz_property = PropertyRecorder("baz")

        def do_something(self, arg: str) -> int:
            return self.do_something_func.record_call_and_return(arg)

        @property
        def baz(self) -> int:
            return self.baz_property.get()

        @baz.setter
        def baz(self, value: int) -> None:
            self.baz_property.set(value)

Recorders are meant for a single test thread and are not synchronised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Union

from aumai_fakekit.models import CallSnapshot, PropertySnapshot, ReturnStub

logger = logging.getLogger(__name__)

# Marks an absent default/current value so that None stays a valid value.
_MISSING: Any = object()

Failure = Union[BaseException, type[BaseException]]


class UnarrangedMockError(AssertionError):
    """Raised when a recorder is exercised before it has been arranged.

    This signals a broken test setup, not a runtime condition; it derives
    from :class:`AssertionError` so that it fails the enclosing test.
    """


# ---------------------------------------------------------------------------
# Function recorders
# ---------------------------------------------------------------------------


class CallRecorder:
    """Record calls to a mocked function and optionally stub its behaviour.

    Only the most recent call's arguments are kept.  For a function taking
    several parameters, pass them as a tuple; for a single parameter pass
    the value itself and read it back via :attr:`last_argument`.

    Args:
        name: Optional label of the function, used in diagnostics only.
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._call_count = 0
        self._last_arguments: Any = None
        self._side_effect: Callable[[Any], None] | None = None
        self._failure: Failure | None = None

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def call_count(self) -> int:
        """Number of calls recorded since creation or the last reset."""
        return self._call_count

    @property
    def called(self) -> bool:
        return self._call_count >= 1

    @property
    def called_once(self) -> bool:
        return self._call_count == 1

    @property
    def last_arguments(self) -> Any:
        """Arguments of the most recent call, or None if never called."""
        return self._last_arguments

    @property
    def last_argument(self) -> Any:
        """Alias of :attr:`last_arguments` for single-parameter functions."""
        return self._last_arguments

    @property
    def configured_failure(self) -> Failure | None:
        return self._failure

    # ------------------------------------------------------------------
    # Arrangement
    # ------------------------------------------------------------------

    def stub(self, handler: Callable[[Any], None]) -> None:
        """Run *handler* with the call's arguments on every recorded call.

        Replaces any previously installed handler.
        """
        self._side_effect = handler
        logger.debug("Installed side effect on %s", self._label())

    def configure_failure(self, error: Failure) -> None:
        """Raise *error* from every subsequent maybe-fail call until reset.

        Args:
            error: An exception instance or class.  It is raised as given.

        Raises:
            TypeError: When *error* is not an exception instance or class.
        """
        if not (
            isinstance(error, BaseException)
            or (isinstance(error, type) and issubclass(error, BaseException))
        ):
            raise TypeError(
                f"failure for {self._label()} must be an exception, got {error!r}"
            )
        self._failure = error
        logger.debug("Configured failure %r on %s", error, self._label())

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_call(self, args: Any = ()) -> None:
        """Record a call with *args* and run the side effect, if any.

        Calling without arguments records the empty tuple, which is how
        zero-parameter functions are mocked.
        """
        self._call_count += 1
        self._last_arguments = args
        if self._side_effect is not None:
            self._side_effect(args)

    def record_call_and_maybe_fail(self, args: Any = ()) -> None:
        """Record a call, then raise the configured failure if there is one.

        The call is counted even when the failure is raised.
        """
        self.record_call(args)
        self._raise_configured_failure()

    def reset(self) -> None:
        """Return to the initial state.

        Clears the call count, the recorded arguments, the configured
        failure and the side-effect handler.
        """
        self._call_count = 0
        self._last_arguments = None
        self._failure = None
        self._side_effect = None
        logger.debug("Reset %s", self._label())

    def snapshot(self) -> CallSnapshot:
        """Return the current inspection state as a model."""
        return CallSnapshot(
            name=self._name,
            call_count=self._call_count,
            called=self.called,
            called_once=self.called_once,
            last_arguments=self._last_arguments,
            has_failure=self._failure is not None,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_configured_failure(self) -> None:
        if self._failure is not None:
            raise self._failure

    def _label(self) -> str:
        return f"'{self._name}'" if self._name else f"unnamed {type(self).__name__}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, call_count={self._call_count})"


class ReturnValueResolver(CallRecorder):
    """Record calls to a mocked function and resolve its return value.

    Stubs are tried in the order they were added; the first whose condition
    matches the call's arguments produces the value.  When none matches,
    :attr:`default_value` is returned.  Because the first match wins, add
    general stubs after specific ones.

    Args:
        name: Optional label of the function, used in diagnostics only.
    """

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name)
        self._stubs: list[ReturnStub] = []
        self._default_value: Any = _MISSING

    # ------------------------------------------------------------------
    # Default value
    # ------------------------------------------------------------------

    @property
    def default_value(self) -> Any:
        """Fallback return value, or None when absent."""
        if self._default_value is _MISSING:
            return None
        return self._default_value

    @default_value.setter
    def default_value(self, value: Any) -> None:
        self._default_value = value

    @default_value.deleter
    def default_value(self) -> None:
        self._default_value = _MISSING

    @property
    def has_default_value(self) -> bool:
        return self._default_value is not _MISSING

    @property
    def stubs(self) -> list[ReturnStub]:
        """Return a copy of the registered stubs in match order."""
        return list(self._stubs)

    # ------------------------------------------------------------------
    # Arrangement
    # ------------------------------------------------------------------

    def returns(self, value: Any, when: Callable[[Any], bool] | None = None) -> None:
        """Add a stub returning *value*, optionally only when *when* holds.

        *value* is returned verbatim, even if it is callable; use
        :meth:`returns_from` to compute the value per call.
        """
        self._stubs.append(ReturnStub(value=value, condition=when))
        logger.debug("Added static stub #%d on %s", len(self._stubs), self._label())

    def returns_from(
        self,
        handler: Callable[[Any], Any],
        when: Callable[[Any], bool] | None = None,
    ) -> None:
        """Add a stub whose value is ``handler(args)``, evaluated per call."""
        self._stubs.append(ReturnStub(handler=handler, condition=when))
        logger.debug("Added dynamic stub #%d on %s", len(self._stubs), self._label())

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_call_and_return(self, args: Any = ()) -> Any:
        """Record a call and return the stubbed value for *args*.

        Raises:
            UnarrangedMockError: When no stub matches and there is no default.
        """
        self.record_call(args)
        return self._resolve(args)

    def record_call_and_return_or_fail(self, args: Any = ()) -> Any:
        """Record a call, then raise the configured failure or return a value."""
        self.record_call(args)
        self._raise_configured_failure()
        return self._resolve(args)

    def reset(self) -> None:
        """Return to the initial state, also dropping stubs and the default."""
        super().reset()
        self._default_value = _MISSING
        self._stubs.clear()

    def snapshot(self) -> CallSnapshot:
        snapshot = super().snapshot()
        return snapshot.model_copy(
            update={
                "stub_count": len(self._stubs),
                "has_default_value": self.has_default_value,
            }
        )

    def _resolve(self, args: Any) -> Any:
        for stub in self._stubs:
            if stub.matches(args):
                return stub.produce(args)
        if self._default_value is not _MISSING:
            return self._default_value
        logger.debug("No return value arranged for %s", self._label())
        raise UnarrangedMockError(f"No return value for {self._label()}")


# ---------------------------------------------------------------------------
# Property recorder
# ---------------------------------------------------------------------------


class PropertyRecorder:
    """Provide a fake value for a property and record reads and writes.

    Test code arranges the value by assigning :attr:`current_value`; the
    fake's getter and setter call :meth:`get` and :meth:`set`.  Only
    :meth:`set` counts as a write.

    Args:
        name: Optional label of the property, used in diagnostics only.
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._value: Any = _MISSING
        self._has_been_read = False
        self._has_been_written = False

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def current_value(self) -> Any:
        """The fake value, or None when unarranged."""
        if self._value is _MISSING:
            return None
        return self._value

    @current_value.setter
    def current_value(self, value: Any) -> None:
        self._value = value

    @current_value.deleter
    def current_value(self) -> None:
        self._value = _MISSING

    @property
    def is_arranged(self) -> bool:
        return self._value is not _MISSING

    @property
    def has_been_read(self) -> bool:
        return self._has_been_read

    @property
    def has_been_written(self) -> bool:
        return self._has_been_written

    def get(self) -> Any:
        """Record a read and return the fake value.

        Use this when implementing the getter of the mocked property.

        Raises:
            UnarrangedMockError: When no value has been arranged.
        """
        self._has_been_read = True
        if self._value is _MISSING:
            message = (
                f"No value for property '{self._name}'"
                if self._name
                else "No value for property"
            )
            logger.debug("%s", message)
            raise UnarrangedMockError(message)
        return self._value

    def set(self, new_value: Any) -> None:
        """Record a write of *new_value* by the system under test.

        Use this when implementing the setter of the mocked property.  To
        arrange a value from test code, assign :attr:`current_value`.
        """
        self._has_been_written = True
        self._value = new_value

    def reset(self) -> None:
        """Drop the value and clear the read/write flags."""
        self._value = _MISSING
        self._has_been_read = False
        self._has_been_written = False
        logger.debug("Reset property %s", self._name or "<unnamed>")

    def snapshot(self) -> PropertySnapshot:
        """Return the current inspection state as a model."""
        return PropertySnapshot(
            name=self._name,
            is_arranged=self.is_arranged,
            current_value=self.current_value,
            has_been_read=self._has_been_read,
            has_been_written=self._has_been_written,
        )

    def __repr__(self) -> str:
        return (
            f"PropertyRecorder(name={self._name!r}, "
            f"has_been_read={self._has_been_read}, "
            f"has_been_written={self._has_been_written})"
        )


# ---------------------------------------------------------------------------
# Fake-level helpers
# ---------------------------------------------------------------------------

Recorder = Union[CallRecorder, PropertyRecorder]


def _instance_attributes(fake: object) -> dict[str, Any]:
    """Return *fake*'s instance attributes, including those held in slots."""
    attributes: dict[str, Any] = dict(getattr(fake, "__dict__", {}))
    for cls in type(fake).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__") or slot in attributes:
                continue
            # Unassigned slots raise AttributeError.
            try:
                attributes[slot] = getattr(fake, slot)
            except AttributeError:
                continue
    return attributes


def recorders_of(fake: object) -> dict[str, Recorder]:
    """Return the recorders held in *fake*'s instance attributes, by name."""
    return {
        attr: value
        for attr, value in _instance_attributes(fake).items()
        if isinstance(value, (CallRecorder, PropertyRecorder))
    }


def reset_all(*targets: object) -> int:
    """Reset recorders and every recorder held by fakes.

    Each target is either a recorder, which is reset directly, or a fake
    whose recorder attributes are all reset.

    Returns:
        The number of recorders reset.
    """
    count = 0
    for target in targets:
        if isinstance(target, (CallRecorder, PropertyRecorder)):
            target.reset()
            count += 1
            continue
        for recorder in recorders_of(target).values():
            recorder.reset()
            count += 1
    logger.debug("Reset %d recorder(s)", count)
    return count


__all__ = [
    "CallRecorder",
    "ReturnValueResolver",
    "PropertyRecorder",
    "Recorder",
    "UnarrangedMockError",
    "recorders_of",
    "reset_all",
]
