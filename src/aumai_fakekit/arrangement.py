"""Build arranged recorders from declarative YAML or JSON files."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from aumai_fakekit.core import (
    CallRecorder,
    PropertyRecorder,
    Recorder,
    ReturnValueResolver,
)
from aumai_fakekit.models import ArrangementConfig, MemberKind, MemberSpec

logger = logging.getLogger(__name__)


class InjectedFailure(Exception):
    """Failure declared for a member in an arrangement file."""

    def __init__(self, member: str, message: str) -> None:
        super().__init__(message)
        self.member = member


class MemberNotFoundError(KeyError):
    """Raised when no recorder is arranged under a member name."""


def load_config(config_path: str | Path) -> ArrangementConfig:
    """Load an ArrangementConfig from a YAML or JSON file."""
    path = Path(config_path)
    raw_text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw_text)
    else:
        data = json.loads(raw_text)
    return ArrangementConfig.model_validate(data or {})


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _equal(expected: Any, actual: Any) -> bool:
    if _is_sequence(expected) and _is_sequence(actual):
        return len(expected) == len(actual) and all(
            _equal(want, got) for want, got in zip(expected, actual)
        )
    return bool(actual == expected)


def condition_for(expected: Any) -> Callable[[Any], bool]:
    """Return a predicate matching call arguments against *expected*.

    Mappings match as a subset: every key of *expected* must be present in
    the call's mapping arguments with an equal value.  Sequences match
    element-wise regardless of type, so a list read from YAML or JSON
    matches the tuple a fake passes for several parameters.  Anything
    else matches by equality.
    """

    def condition(args: Any) -> bool:
        if isinstance(expected, Mapping) and isinstance(args, Mapping):
            return all(
                key in args and _equal(value, args[key])
                for key, value in expected.items()
            )
        return _equal(expected, args)

    return condition


def build_recorder(spec: MemberSpec) -> Recorder:
    """Create and arrange the recorder described by *spec*."""
    if spec.kind == MemberKind.property:
        prop = PropertyRecorder(spec.name)
        if spec.has_value:
            prop.current_value = spec.value
        return prop

    recorder: CallRecorder
    if spec.kind == MemberKind.returning:
        resolver = ReturnValueResolver(spec.name)
        for stub in spec.stubs:
            when = condition_for(stub.when) if stub.has_condition else None
            resolver.returns(stub.value, when=when)
        if spec.has_default:
            resolver.default_value = spec.default
        recorder = resolver
    else:
        recorder = CallRecorder(spec.name)

    if spec.failure is not None:
        recorder.configure_failure(InjectedFailure(spec.name, spec.failure))
    return recorder


def build_recorders(config: ArrangementConfig) -> dict[str, Recorder]:
    """Create one arranged recorder per member, keyed by member name."""
    recorders = {member.name: build_recorder(member) for member in config.members}
    logger.debug("Built %d recorder(s) from arrangement", len(recorders))
    return recorders


def get_member(recorders: Mapping[str, Recorder], name: str) -> Recorder:
    """Look up the recorder for *name*.

    Raises:
        MemberNotFoundError: When no member is arranged under *name*.
    """
    recorder = recorders.get(name)
    if recorder is None:
        raise MemberNotFoundError(f"No member arranged under '{name}'")
    return recorder


__all__ = [
    "InjectedFailure",
    "MemberNotFoundError",
    "load_config",
    "condition_for",
    "build_recorder",
    "build_recorders",
    "get_member",
]
