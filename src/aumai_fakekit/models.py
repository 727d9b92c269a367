"""Pydantic models for aumai-fakekit."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Stub entries
# ---------------------------------------------------------------------------


class ReturnStub(BaseModel):
    """A single conditional rule for producing a return value.

    A stub either carries a static ``value`` or a ``handler`` that computes
    the value from the call's arguments.  A stub without a ``condition``
    matches every call.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    value: Any = Field(default=None, description="Static return value")
    handler: Callable[[Any], Any] | None = Field(
        default=None, description="Computes the return value from the arguments"
    )
    condition: Callable[[Any], bool] | None = Field(
        default=None, description="Predicate selecting the calls this stub handles"
    )

    @property
    def is_dynamic(self) -> bool:
        return self.handler is not None

    def matches(self, args: Any) -> bool:
        """Return True when this stub should handle a call with *args*."""
        if self.condition is None:
            return True
        return bool(self.condition(args))

    def produce(self, args: Any) -> Any:
        """Return the stubbed value for a call with *args*."""
        if self.handler is not None:
            return self.handler(args)
        return self.value


# ---------------------------------------------------------------------------
# Inspection snapshots
# ---------------------------------------------------------------------------


class CallSnapshot(BaseModel):
    """Point-in-time view of a function recorder."""

    name: str | None = Field(default=None, description="Label of the mocked function")
    call_count: int = Field(default=0, ge=0, description="Number of recorded calls")
    called: bool = Field(default=False)
    called_once: bool = Field(default=False)
    last_arguments: Any = Field(
        default=None, description="Arguments of the most recent call"
    )
    stub_count: int = Field(default=0, ge=0, description="Registered return stubs")
    has_default_value: bool = Field(default=False)
    has_failure: bool = Field(
        default=False, description="Whether a failure is configured"
    )


class PropertySnapshot(BaseModel):
    """Point-in-time view of a property recorder."""

    name: str | None = Field(default=None, description="Label of the mocked property")
    is_arranged: bool = Field(default=False, description="Whether a value is present")
    current_value: Any = Field(default=None)
    has_been_read: bool = Field(default=False)
    has_been_written: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Declarative arrangement
# ---------------------------------------------------------------------------


class MemberKind(str, Enum):
    """Which recorder backs a mocked member."""

    function = "function"    # CallRecorder
    returning = "returning"  # ReturnValueResolver
    property = "property"    # PropertyRecorder


class StubSpec(BaseModel):
    """A return stub declared in an arrangement file.

    ``when`` is optional; an explicit ``when: null`` matches calls whose
    arguments are ``None``.
    """

    value: Any = Field(default=None, description="Value returned when the stub matches")
    when: Any = Field(
        default=None, description="Expected arguments, or a subset of keyword arguments"
    )

    @property
    def has_condition(self) -> bool:
        return "when" in self.model_fields_set


class MemberSpec(BaseModel):
    """Arrangement for a single mocked member."""

    name: str = Field(description="Label of the mocked member")
    kind: MemberKind = Field(
        default=MemberKind.returning, description="Recorder backing the member"
    )
    stubs: list[StubSpec] = Field(
        default_factory=list, description="Return stubs in match-priority order"
    )
    default: Any = Field(default=None, description="Fallback return value")
    failure: str | None = Field(
        default=None, description="Message of a failure raised on every call"
    )
    value: Any = Field(default=None, description="Arranged property value")

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def has_value(self) -> bool:
        return "value" in self.model_fields_set

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, value: str) -> str:
        """Ensure name is non-empty."""
        if not value.strip():
            raise ValueError("name must not be empty")
        return value.strip()

    @model_validator(mode="after")
    def fields_must_fit_kind(self) -> MemberSpec:
        """Reject settings the member's recorder cannot hold."""
        if self.kind != MemberKind.returning and (self.stubs or self.has_default):
            raise ValueError(
                f"'{self.name}': stubs and default require kind 'returning'"
            )
        if self.kind != MemberKind.property and self.has_value:
            raise ValueError(f"'{self.name}': value requires kind 'property'")
        if self.kind == MemberKind.property and self.failure is not None:
            raise ValueError(f"'{self.name}': properties cannot fail")
        return self


class ArrangementConfig(BaseModel):
    """Top-level arrangement for a set of mocked members."""

    members: list[MemberSpec] = Field(
        default_factory=list, description="All arranged members"
    )

    @model_validator(mode="after")
    def names_must_be_unique(self) -> ArrangementConfig:
        """Ensure every member name appears once."""
        seen: set[str] = set()
        for member in self.members:
            if member.name in seen:
                raise ValueError(f"duplicate member name '{member.name}'")
            seen.add(member.name)
        return self


__all__ = [
    "ReturnStub",
    "CallSnapshot",
    "PropertySnapshot",
    "MemberKind",
    "StubSpec",
    "MemberSpec",
    "ArrangementConfig",
]
