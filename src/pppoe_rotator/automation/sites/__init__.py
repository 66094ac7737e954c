from .portal import UsagePortalFlow, parse_minutes
from .router import RouterFlow

__all__ = ['RouterFlow', 'UsagePortalFlow', 'parse_minutes']
