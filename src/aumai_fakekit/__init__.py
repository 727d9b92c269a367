"""AumAI FakeKit — call, return-value and property recorders for hand-written fakes."""

from aumai_fakekit.arrangement import (
    InjectedFailure,
    MemberNotFoundError,
    build_recorders,
    load_config,
)
from aumai_fakekit.core import (
    CallRecorder,
    PropertyRecorder,
    ReturnValueResolver,
    UnarrangedMockError,
    recorders_of,
    reset_all,
)
from aumai_fakekit.models import (
    ArrangementConfig,
    CallSnapshot,
    MemberKind,
    MemberSpec,
    PropertySnapshot,
    ReturnStub,
    StubSpec,
)

__version__ = "0.1.0"

__all__ = [
    "CallRecorder",
    "ReturnValueResolver",
    "PropertyRecorder",
    "UnarrangedMockError",
    "recorders_of",
    "reset_all",
    "InjectedFailure",
    "MemberNotFoundError",
    "build_recorders",
    "load_config",
    "ArrangementConfig",
    "CallSnapshot",
    "MemberKind",
    "MemberSpec",
    "PropertySnapshot",
    "ReturnStub",
    "StubSpec",
]
