from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterator, Tuple


@dataclass(frozen=True)
class Identity:
    """A PPPoE dial-up identity: the router-side username and its secret."""
    name: str
    secret: str = field(repr=False)

    def __repr__(self) -> str:
        return f"Identity(name={self.name!r}, secret='***')"

    def masked(self) -> str:
        """Return the secret with everything but the last two characters hidden."""
        if len(self.secret) <= 2:
            return "*" * len(self.secret)
        return "*" * (len(self.secret) - 2) + self.secret[-2:]


@dataclass(frozen=True)
class UsageReading:
    """Cumulative usage of one identity, as reported by the usage portal."""
    identity_name: str
    minutes: int
    taken_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        if self.minutes < 0:
            raise ValueError(f"Usage cannot be negative: {self.minutes}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'identity_name': self.identity_name,
            'minutes': self.minutes,
            'taken_at': self.taken_at.isoformat(),
        }


@dataclass(frozen=True)
class Thresholds:
    """Usage limits, in minutes, driving the rotation policy.

    The three values are independent even when two of them coincide:
    ``switch`` starts the search for a replacement, ``available`` decides
    whether a candidate may replace the active identity, and ``disable``
    cuts the connection once every candidate is exhausted.
    """
    switch: int = 10000
    available: int = 10000
    disable: int = 11000

    def __post_init__(self):
        for label, value in (("switch", self.switch), ("available", self.available), ("disable", self.disable)):
            if value < 0:
                raise ValueError(f"{label} threshold cannot be negative: {value}")

    def to_dict(self) -> Dict[str, int]:
        return {'switch': self.switch, 'available': self.available, 'disable': self.disable}


class CandidateSet:
    """An immutable, ordered pool of identities.

    The order is fixed when the set is built and is the only order the
    rotation search ever uses.
    """

    def __init__(self, identities: List[Identity]):
        self._identities: Tuple[Identity, ...] = tuple(identities)
        self._positions: Dict[str, int] = {}
        for index, identity in enumerate(self._identities):
            # First occurrence wins; duplicates are rejected at parse time.
            self._positions.setdefault(identity.name, index)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, str]) -> 'CandidateSet':
        return cls([Identity(name=name, secret=secret) for name, secret in mapping.items()])

    def __len__(self) -> int:
        return len(self._identities)

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._identities)

    def __getitem__(self, index: int) -> Identity:
        return self._identities[index]

    def __repr__(self) -> str:
        return f"CandidateSet({list(self.names())!r})"

    def names(self) -> Tuple[str, ...]:
        return tuple(identity.name for identity in self._identities)

    def index_of(self, name: str) -> Optional[int]:
        return self._positions.get(name)

    def get(self, name: str) -> Optional[Identity]:
        index = self.index_of(name)
        return None if index is None else self._identities[index]

    def cyclic_after(self, index: int) -> Iterator[Identity]:
        """Yield every other identity, starting right after ``index`` and wrapping around."""
        count = len(self._identities)
        for offset in range(1, count):
            yield self._identities[(index + offset) % count]
