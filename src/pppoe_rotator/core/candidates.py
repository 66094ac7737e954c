"""Parsing of the ``name:secret,name:secret`` identity pool."""

import logging
from typing import Dict

from .models import CandidateSet

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = ","
FIELD_SEPARATOR = ":"


class ConfigurationError(ValueError):
    """Raised when the rotator configuration cannot be used."""
    pass


def parse_candidates(raw: str) -> CandidateSet:
    """Parse a comma-separated list of ``name:secret`` pairs.

    Args:
        raw: The credential list, e.g. ``"id1:pass1,id2:pass2"``

    Returns:
        A CandidateSet in the order the pairs were given

    Raises:
        ConfigurationError: If any pair is malformed or a name is repeated.
            The whole list is rejected; no partial pool is returned.
    """
    if raw is None or not raw.strip():
        raise ConfigurationError("PPPOE_CREDENTIALS is empty. Expected 'id1:pass1,id2:pass2,...'")

    pool: Dict[str, str] = {}
    for position, pair in enumerate(raw.split(PAIR_SEPARATOR), start=1):
        parts = pair.strip().split(FIELD_SEPARATOR)
        if len(parts) != 2:
            raise ConfigurationError(
                f"Invalid PPPOE_CREDENTIALS format at pair {position}. "
                "Expected 'id1:pass1,id2:pass2,...'"
            )
        name, secret = parts
        if not name:
            raise ConfigurationError(f"Empty identity name at pair {position} of PPPOE_CREDENTIALS")
        if name in pool:
            # Which duplicate the router means is undecidable, so refuse to guess.
            raise ConfigurationError(f"Duplicate identity name in PPPOE_CREDENTIALS: '{name}'")
        pool[name] = secret

    candidates = CandidateSet.from_mapping(pool)
    logger.debug(f"Parsed {len(candidates)} PPPoE identities: {', '.join(candidates.names())}")
    return candidates
