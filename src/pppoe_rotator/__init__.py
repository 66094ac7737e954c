# Avoid importing browser engines at top-level to keep the core importable on its own
__all__ = ["RotationEngine", "Identity", "Thresholds", "CandidateSet", "parse_candidates"]

def __getattr__(name):
    if name == "RotationEngine":
        from .core.engine import RotationEngine
        return RotationEngine
    if name in ("Identity", "Thresholds", "CandidateSet"):
        from .core import models
        return getattr(models, name)
    if name == "parse_candidates":
        from .core.candidates import parse_candidates
        return parse_candidates
    raise AttributeError(name)
