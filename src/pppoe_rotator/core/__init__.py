"""Identity-rotation decision engine.

Nothing in this package reads the environment or drives a browser; the
collaborators it needs are passed in explicitly.
"""

from .models import Identity, UsageReading, Thresholds, CandidateSet
from .candidates import ConfigurationError, parse_candidates
from .decisions import (
    ApplyOutcome,
    ApplyStatus,
    DecisionKind,
    RotationDecision,
    RotationOutcome,
)
from .engine import RotationEngine, DEFAULT_DISABLE_SECRET

__all__ = [
    'ApplyOutcome',
    'ApplyStatus',
    'CandidateSet',
    'ConfigurationError',
    'DEFAULT_DISABLE_SECRET',
    'DecisionKind',
    'Identity',
    'RotationDecision',
    'RotationEngine',
    'RotationOutcome',
    'Thresholds',
    'UsageReading',
    'parse_candidates',
]
