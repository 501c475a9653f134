import copy as _copy
import functools
import time

from ._helpers import (
    Direction,
    RelationEntry,
    RelationState,
    is_no_relationship,
)
from ._History import History
from ._Views import Views


@functools.total_ordering
class RelationStore(History, Views):
    """In-memory table of keyed, valued relationships between integer vertices.

    For every ordered pair ``(i, j)`` the store keeps zero or more relation
    keys (strings, ``""`` is the default key), each mapped to a
    ``RelationEntry(outward, magnitude)``. Directed and undirected semantics
    share one table: every outward entry at ``(i, j, key)`` has a mirror at
    ``(j, i, key)``, outward itself for undirected relationships and
    ``outward=False`` for one-way relationships.

    Parameters
    --
    directed : bool, optional
        Default mode for the direction-agnostic operations (``set``,
        ``contains``, ``clear`` without an explicit ``undirected`` flag).
    no_relationship : float, optional
        Value returned by ``get`` for absent relationships. Setting a
        relationship to this value (within ``1e-7``) deletes it.

    Notes
    -
    - Vertices exist only as endpoints of stored entries; there is no
      separate vertex add/remove.
    - Absence is never an error: missing vertices, pairs and keys give empty
      sets, ``False``, or ``no_relationship``, and clears on them are no-ops.
    - ``get`` negates mirror-only magnitudes, so an incoming-only relationship
      of value ``v`` reads the same as an outgoing relationship of ``-v``. Use
      ``state`` to tell them apart.
    - Not thread-safe. Concurrent mutation from several threads must be
      serialised by the caller.
    - Every public mutation appends an event to the in-memory history. For
      bulk loads call ``enable_history(False)`` first and re-enable it after.

    See Also

    set, get, clear, neighbors, relations_view

    """

    def __init__(self, directed: bool = True, no_relationship: float = 0.0):
        self.directed = directed
        self.no_relationship = no_relationship

        # source -> target -> key -> RelationEntry
        self._data: dict[int, dict[int, dict[str, RelationEntry]]] = {}

        # History and Timeline
        self._history_enabled = True
        self._history = []  # list[dict]
        self._version = 0
        self._history_clock0 = time.perf_counter_ns()
        self._install_history_hooks()  # wrap mutating methods
        self._snapshots = []

    # Identity

    def copy(self, history: bool = False):
        """Deep copy of the store.

        Parameters
        --
        history : bool
            If True, copy the mutation history and snapshot timeline.
            If False, the new store starts with a clean history.

        Returns
        ---
        RelationStore

        """
        new = type(self)(directed=self.directed, no_relationship=self.no_relationship)
        new._data = self._copy_table()
        if history:
            new._history = [dict(evt) for evt in self._history]
            new._version = self._version
            new._snapshots = _copy.deepcopy(self._snapshots)
        return new

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def assign(self, other):
        """Replace this store's contents and configuration with a copy of ``other``.

        Returns
        ---
        RelationStore
            ``self``. Assigning a store to itself changes nothing.

        """
        if other is self:
            return self
        self.directed = other.directed
        self.no_relationship = other.no_relationship
        self._data = other._copy_table()
        return self

    def _copy_table(self):
        # entries are frozen, so sharing them keeps the copies independent
        return {i: {j: dict(rels) for j, rels in row.items()} for i, row in self._data.items()}

    def _ordered_table(self):
        return tuple(
            (
                i,
                tuple(
                    (j, tuple((k, self._data[i][j][k]) for k in sorted(self._data[i][j])))
                    for j in sorted(self._data[i])
                ),
            )
            for i in sorted(self._data)
        )

    def __lt__(self, other):
        if not isinstance(other, RelationStore):
            return NotImplemented
        return self._ordered_table() < other._ordered_table()

    def __eq__(self, other):
        if not isinstance(other, RelationStore):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # mutable

    def __len__(self):
        return len(self._data)

    def __contains__(self, i):
        return self.contains_undir(i)

    def __repr__(self):
        return (
            f"RelationStore(directed={self.directed}, no_relationship={self.no_relationship}, "
            f"vertices={len(self._data)}, keys={len(self.keys())})"
        )

    def size(self) -> int:
        """Number of vertices with at least one stored entry."""
        return len(self._data)

    # Querying

    def _lookup(self, i, j, key):
        return self._data.get(i, {}).get(j, {}).get(key)

    def entry(self, i, j, key=""):
        """Stored ``RelationEntry`` at ``(i, j, key)``, or None."""
        return self._lookup(i, j, key)

    def state(self, i, j, key="") -> RelationState:
        """Three-state view of ``(i, j, key)``: ABSENT, OUTWARD or MIRROR."""
        entry = self._lookup(i, j, key)
        if entry is None:
            return RelationState.ABSENT
        return entry.state

    def get(self, i, j, key=""):
        """Value of the relationship from ``i`` to ``j`` under ``key``.

        Returns
        ---
        float
            ``no_relationship`` if absent, the magnitude if the entry is
            outward, the negated magnitude if it only mirrors a ``j -> i``
            relationship.

        """
        entry = self._lookup(i, j, key)
        if entry is None:
            return self.no_relationship
        return entry.signed()

    def contains(self, i, j=None, key=None, undirected=None) -> bool:
        """Check for a vertex, a pair, or a keyed relationship.

        Parameters
        --
        i : int
            Source vertex.
        j : int, optional
            Target vertex. If omitted, test vertex ``i`` against all of its
            neighbors.
        key : str, optional
            Relation key. If omitted, any key counts.
        undirected : bool, optional
            If True, mirror-only entries count as presence. If False only
            outward entries do. Defaults to ``not self.directed``.

        Returns
        ---
        bool

        """
        if undirected is None:
            undirected = not self.directed
        row = self._data.get(i)
        if not row:
            return False
        if j is None:
            for rels in row.values():
                if key is None:
                    candidates = rels.values()
                elif key in rels:
                    candidates = (rels[key],)
                else:
                    continue
                if any(undirected or e.outward for e in candidates):
                    return True
            return False
        rels = row.get(j)
        if not rels:
            return False
        if key is None:
            if undirected:
                return True
            return any(e.outward for e in rels.values())
        entry = rels.get(key)
        return entry is not None and (undirected or entry.outward)

    def contains_dir(self, i, j=None, key=None) -> bool:
        return self.contains(i, j, key, undirected=False)

    def contains_undir(self, i, j=None, key=None) -> bool:
        return self.contains(i, j, key, undirected=True)

    def _reaches(self, i, j, key, entry, direction):
        if direction is Direction.UNDIRECTED:
            return True
        if direction is Direction.FROM:
            return entry.outward
        # TO: incoming-only, or outward with an outward mirror (two-way)
        return not entry.outward or self._data[j][i][key].outward

    def neighbors(self, i, direction=Direction.UNDIRECTED, key=None) -> set:
        """Neighbor ids of ``i`` under a direction filter.

        Parameters
        --
        i : int
        direction : Direction, optional
            UNDIRECTED counts every entry; FROM counts outward entries; TO
            counts mirror-only entries and outward entries whose reverse
            entry is outward too.
        key : str, optional
            Restrict to one relation key.

        Returns
        ---
        set[int]

        """
        out = set()
        row = self._data.get(i)
        if not row:
            return out
        for j, rels in row.items():
            if key is None:
                candidates = rels.items()
            elif key in rels:
                candidates = ((key, rels[key]),)
            else:
                continue
            for k, entry in candidates:
                if self._reaches(i, j, k, entry, direction):
                    out.add(j)
                    break
        return out

    def nbrs(self, i, key=None) -> set:
        return self.neighbors(i, Direction.UNDIRECTED, key)

    def nbrs_to(self, i, key=None) -> set:
        return self.neighbors(i, Direction.TO, key)

    def nbrs_from(self, i, key=None) -> set:
        return self.neighbors(i, Direction.FROM, key)

    def vertices(self) -> set:
        """All vertex ids with at least one stored entry."""
        return set(self._data)

    def keys(self, i=None, j=None) -> set:
        """Relation keys in use.

        Parameters
        --
        i : int, optional
            Restrict to keys on entries of vertex ``i``.
        j : int, optional
            With ``i``, restrict to keys on the ``(i, j)`` pair. Without ``i``
            there is no pair, so the result is empty.

        Returns
        ---
        set[str]

        """
        if i is None:
            if j is not None:
                return set()
            return {k for row in self._data.values() for rels in row.values() for k in rels}
        row = self._data.get(i, {})
        if j is None:
            return {k for rels in row.values() for k in rels}
        return set(row.get(j, {}))

    def relations(self, key=None):
        """Iterate ``(source, target, key, entry)`` in sorted order.

        Parameters
        --
        key : str, optional
            Only yield entries under this key.

        Yields

        tuple[int, int, str, RelationEntry]

        """
        for i in sorted(self._data):
            row = self._data[i]
            for j in sorted(row):
                rels = row[j]
                if key is not None:
                    if key in rels:
                        yield i, j, key, rels[key]
                    continue
                for k in sorted(rels):
                    yield i, j, k, rels[k]

    # Mutation: set

    def _write(self, i, j, key, outward, value):
        self._data.setdefault(i, {}).setdefault(j, {})[key] = RelationEntry(outward, float(value))

    def _set(self, i, j, key, undirected, value):
        if is_no_relationship(value, self.no_relationship):
            self._clear_entry(i, j, key, undirected)
            return
        self._write(i, j, key, True, value)
        if undirected:
            self._write(j, i, key, True, value)
            return
        mirror = self._lookup(j, i, key)
        # never demote an independently declared j -> i relationship
        if mirror is None or not mirror.outward:
            self._write(j, i, key, False, value)

    def set(self, i, j, value, key="", undirected=None):
        """Create or overwrite the relationship from ``i`` to ``j``.

        Parameters
        --
        i, j : int
            Source and target vertices.
        value : float
            Magnitude. A value equal to ``no_relationship`` (within ``1e-7``)
            clears the relationship instead.
        key : str, optional
            Relation key, default ``""``.
        undirected : bool, optional
            Write a symmetric relationship. Defaults to ``not self.directed``.

        Returns
        ---
        None

        """
        if undirected is None:
            undirected = not self.directed
        self._set(i, j, key, undirected, value)

    def set_dir(self, i, j, value, key=""):
        self._set(i, j, key, False, value)

    def set_undir(self, i, j, value, key=""):
        self._set(i, j, key, True, value)

    # Mutation: clear

    def _prune(self, i, j):
        for a, b in ((i, j), (j, i)):
            row = self._data.get(a)
            if row is None:
                continue
            if b in row and not row[b]:
                del row[b]
            if not row:
                del self._data[a]

    def _clear_entry(self, i, j, key, undirected):
        current = self._lookup(i, j, key)
        if current is None:
            return
        if undirected:
            del self._data[i][j][key]
            self._data.get(j, {}).get(i, {}).pop(key, None)
        elif not current.outward:
            # clearing i -> j leaves a j -> i relationship alone
            return
        elif i == j:
            del self._data[i][j][key]
        else:
            mirror = self._data[j][i][key]
            if mirror.outward:
                # two-way pair: keep j -> i alive
                self._data[i][j][key] = RelationEntry(False, mirror.magnitude)
            else:
                del self._data[i][j][key]
                del self._data[j][i][key]
        self._prune(i, j)

    def _clear_pair(self, i, j, undirected):
        rels = self._data.get(i, {}).get(j)
        if not rels:
            return
        if undirected:
            del self._data[i][j]
            self._data.get(j, {}).pop(i, None)
            self._prune(i, j)
            return
        for key in list(rels):
            self._clear_entry(i, j, key, False)

    def _clear_vertex_key(self, i, key, undirected):
        if undirected:
            targets = self.neighbors(i, Direction.UNDIRECTED, key)
        else:
            targets = self.neighbors(i)
        for j in sorted(targets):
            self._clear_entry(i, j, key, undirected)

    def _clear_vertex(self, i):
        row = self._data.pop(i, None)
        if row is None:
            return
        for j in row:
            back = self._data.get(j)
            if back is None:
                continue
            back.pop(i, None)
            if not back:
                del self._data[j]

    def _clear_key(self, key):
        for i in list(self._data):
            row = self._data[i]
            for j in list(row):
                row[j].pop(key, None)
                if not row[j]:
                    del row[j]
            if not row:
                del self._data[i]

    def _clear(self, i, j, key, undirected):
        if i is None:
            if j is not None:
                return
            if key is None:
                self._data.clear()
            else:
                self._clear_key(key)
        elif j is None:
            if key is not None:
                self._clear_vertex_key(i, key, undirected)
            elif undirected is None:
                self._clear_vertex(i)
            else:
                for k in sorted(self.keys(i)):
                    self._clear_vertex_key(i, k, undirected)
        elif key is None:
            self._clear_pair(i, j, undirected)
        else:
            self._clear_entry(i, j, key, undirected)

    def clear(self, i=None, j=None, key=None, undirected=None):
        """Remove relationships.

        Which relationships go depends on the arguments given:

        - nothing: everything.
        - ``key`` only: every entry under ``key``, anywhere.
        - ``i`` only: vertex ``i`` and every entry touching it.
        - ``i`` and ``key``: the ``key`` relationships between ``i`` and its neighbors.
        - ``i`` and ``j``: every key between the pair.
        - ``i``, ``j`` and ``key``: that single relationship.

        Parameters
        --
        i, j : int, optional
        key : str, optional
        undirected : bool, optional
            Symmetric clear (both directions removed) or directed clear (only
            ``i -> j`` removed; a live ``j -> i`` relationship survives as a
            mirror-only entry). Defaults to ``not self.directed``. Ignored by
            the whole-store and key-wide removals. With ``i`` only, an
            explicit ``undirected`` applies the per-key rule of ``clear_dir(i)``
            / ``clear_undir(i)``; leaving it unset removes the vertex outright.

        Returns
        ---
        None

        """
        if i is not None and (j is not None or key is not None) and undirected is None:
            undirected = not self.directed
        self._clear(i, j, key, undirected)

    def clear_dir(self, i, j=None, key=None):
        """Directed clear of ``i -> j`` relationships (see ``clear``).

        With neither ``j`` nor ``key``, applies the directed vertex clear to
        every key touching ``i``.
        """
        self._clear(i, j, key, False)

    def clear_undir(self, i, j=None, key=None):
        """Symmetric clear (see ``clear``).

        With neither ``j`` nor ``key``, applies the symmetric vertex clear to
        every key touching ``i``.
        """
        self._clear(i, j, key, True)

    def clear_vertex(self, i):
        """Remove vertex ``i`` and every relationship touching it, in either direction."""
        self._clear_vertex(i)

    def clear_key(self, key):
        """Remove every relationship under ``key``."""
        self._clear_key(key)
