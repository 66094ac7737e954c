from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from .models import Identity, UsageReading


class DecisionKind(str, Enum):
    NO_ACTION = "no_action"
    SWITCH = "switch"
    DISABLE = "disable"
    NO_IDENTITY_AVAILABLE = "no_identity_available"


@dataclass(frozen=True)
class RotationDecision:
    """What one cycle decided to do.

    ``target`` is the identity to switch to for SWITCH, the identity being
    disabled for DISABLE, and None otherwise.
    """
    kind: DecisionKind
    target: Optional[Identity] = None

    @classmethod
    def no_action(cls) -> 'RotationDecision':
        return cls(DecisionKind.NO_ACTION)

    @classmethod
    def switch_to(cls, identity: Identity) -> 'RotationDecision':
        return cls(DecisionKind.SWITCH, identity)

    @classmethod
    def disable(cls, identity: Identity) -> 'RotationDecision':
        return cls(DecisionKind.DISABLE, identity)

    @classmethod
    def no_identity_available(cls) -> 'RotationDecision':
        return cls(DecisionKind.NO_IDENTITY_AVAILABLE)


class ApplyStatus(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class ApplyOutcome:
    status: ApplyStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ApplyStatus.SUCCESS


@dataclass
class RotationOutcome:
    """Everything one decision cycle observed and did."""
    decision: RotationDecision
    active: Optional[Identity] = None
    active_usage: Optional[int] = None
    readings: List[UsageReading] = field(default_factory=list)
    unavailable: Dict[str, str] = field(default_factory=dict)
    probed: List[str] = field(default_factory=list)
    applied: Optional[ApplyOutcome] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'decision': self.decision.kind.value,
            'target': self.decision.target.name if self.decision.target else None,
            'active': self.active.name if self.active else None,
            'active_usage': self.active_usage,
            'probed': list(self.probed),
            'readings': [r.to_dict() for r in self.readings],
            'unavailable': dict(self.unavailable),
            'applied': self.applied.status.value if self.applied else None,
            'apply_error': self.applied.error if self.applied else None,
        }
