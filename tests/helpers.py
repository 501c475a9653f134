"""Assertions over a store's internal table."""


def assert_no_empty_maps(S):
    """No vertex, neighbor or key map is left present-but-empty."""
    for i, row in S._data.items():
        assert row, f"vertex {i} has an empty neighbor map"
        for j, rels in row.items():
            assert rels, f"pair ({i}, {j}) has an empty key map"


def assert_mirrors_consistent(S):
    """Every outward entry has a mirror; one-way mirrors carry the same magnitude."""
    for i, row in S._data.items():
        for j, rels in row.items():
            for k, entry in rels.items():
                mirror = S._data.get(j, {}).get(i, {}).get(k)
                assert mirror is not None, f"({i}, {j}, {k!r}) has no mirror"
                if not entry.outward:
                    assert mirror.outward, f"({i}, {j}, {k!r}) mirrors a mirror"
                if not mirror.outward:
                    assert abs(mirror.magnitude - entry.magnitude) < 1e-9


def assert_table_invariants(S):
    assert_no_empty_maps(S)
    assert_mirrors_consistent(S)
    assert S.size() == len(S.vertices())
