from dataclasses import dataclass
from enum import Enum

EPSILON = 1e-7  # absolute tolerance for the no-relationship sentinel


class RelationState(Enum):
    ABSENT = "ABSENT"
    OUTWARD = "OUTWARD"
    MIRROR = "MIRROR"


class Direction(Enum):
    UNDIRECTED = "UNDIRECTED"
    FROM = "FROM"
    TO = "TO"


@dataclass(frozen=True, order=True)
class RelationEntry:
    """One stored (source, target, key) relationship.

    Attributes
    --
    outward : bool
        True if the relationship runs from source to target. False marks the
        mirror bookkeeping entry of a relationship running target -> source.
    magnitude : float
        Stored value. Mirror entries carry the magnitude of the relationship
        they mirror.

    Notes
    -
    Ordering compares ``(outward, magnitude)``, so whole tables compare
    lexicographically.

    """

    outward: bool
    magnitude: float

    @property
    def state(self) -> RelationState:
        return RelationState.OUTWARD if self.outward else RelationState.MIRROR

    def signed(self) -> float:
        """Value as read back by ``RelationStore.get`` (mirror entries are negated)."""
        return self.magnitude if self.outward else -self.magnitude


def is_no_relationship(value, sentinel) -> bool:
    return abs(value - sentinel) < EPSILON
