from ._helpers import EPSILON


class StoreDiff:
    """Represents the difference between two store states.

    Attributes
    --
    vertices_added : set
        Vertices in b but not in a
    vertices_removed : set
        Vertices in a but not in b
    relations_added : set
        (source, target, key) triples in b but not in a
    relations_removed : set
        (source, target, key) triples in a but not in b
    relations_changed : dict
        (source, target, key) -> (value in a, value in b), for triples in
        both whose signed values differ by at least ``1e-7``
    keys_added : set
        Relation keys in b but not in a
    keys_removed : set
        Relation keys in a but not in b

    """

    def __init__(self, snapshot_a, snapshot_b):
        self.snapshot_a = snapshot_a
        self.snapshot_b = snapshot_b

        rel_a = snapshot_a["relations"]
        rel_b = snapshot_b["relations"]

        # Compute differences
        self.vertices_added = snapshot_b["vertex_ids"] - snapshot_a["vertex_ids"]
        self.vertices_removed = snapshot_a["vertex_ids"] - snapshot_b["vertex_ids"]
        self.relations_added = rel_b.keys() - rel_a.keys()
        self.relations_removed = rel_a.keys() - rel_b.keys()
        self.relations_changed = {
            t: (rel_a[t], rel_b[t])
            for t in rel_a.keys() & rel_b.keys()
            if abs(rel_a[t] - rel_b[t]) >= EPSILON
        }
        self.keys_added = snapshot_b["keys"] - snapshot_a["keys"]
        self.keys_removed = snapshot_a["keys"] - snapshot_b["keys"]

    def summary(self):
        """Human-readable summary of differences."""
        lines = [
            f"Diff: {self.snapshot_a['label']} - {self.snapshot_b['label']}",
            "",
            f"Vertices: {len(self.vertices_added):+d} added, {len(self.vertices_removed)} removed",
            f"Relations: {len(self.relations_added):+d} added, "
            f"{len(self.relations_removed)} removed, {len(self.relations_changed)} changed",
            f"Keys: {len(self.keys_added):+d} added, {len(self.keys_removed)} removed",
        ]
        return "\n".join(lines)

    def is_empty(self):
        """Check if there are no differences."""
        return (
            not self.vertices_added
            and not self.vertices_removed
            and not self.relations_added
            and not self.relations_removed
            and not self.relations_changed
            and not self.keys_added
            and not self.keys_removed
        )

    def __repr__(self):
        return self.summary()

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {
            "snapshot_a": self.snapshot_a["label"],
            "snapshot_b": self.snapshot_b["label"],
            "vertices_added": sorted(self.vertices_added),
            "vertices_removed": sorted(self.vertices_removed),
            "relations_added": sorted(self.relations_added),
            "relations_removed": sorted(self.relations_removed),
            "relations_changed": {
                f"{i}->{j}:{k}": list(v) for (i, j, k), v in sorted(self.relations_changed.items())
            },
            "keys_added": sorted(self.keys_added),
            "keys_removed": sorted(self.keys_removed),
        }
