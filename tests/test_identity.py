# test_identity.py
import copy
import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from relstore.core.store import RelationStore


def _build_store(directed=True, no_relationship=0.0):
    S = RelationStore(directed=directed, no_relationship=no_relationship)
    S.set_dir(1, 2, 5.0, key="w")
    S.set_undir(2, 3, 1.5, key="v")
    return S


class TestCopy(unittest.TestCase):
    def test_copy_is_deep(self):
        S = _build_store(directed=False, no_relationship=-1.0)
        C = S.copy()
        self.assertEqual(C, S)
        self.assertFalse(C.directed)
        self.assertEqual(C.no_relationship, -1.0)
        C.set_dir(1, 2, 9.0, key="w")
        C.set_dir(7, 8, 1.0)
        self.assertAlmostEqual(S.get(1, 2, "w"), 5.0, places=7)
        self.assertNotIn(7, S.vertices())
        S.clear_vertex(2)
        self.assertIn(2, C.vertices())

    def test_copy_module_routes_to_deep_copy(self):
        S = _build_store()
        for C in (copy.copy(S), copy.deepcopy(S)):
            self.assertEqual(C, S)
            C.clear()
            self.assertEqual(S.size(), 3)

    def test_copy_history_flag(self):
        S = _build_store()
        self.assertEqual(S.copy().history(), [])
        H = S.copy(history=True)
        self.assertEqual(len(H.history()), 2)
        # copied store logs its own mutations
        H.set_dir(4, 5, 1.0)
        self.assertEqual(len(H.history()), 3)
        self.assertEqual(len(S.history()), 2)


class TestAssign(unittest.TestCase):
    def test_assign_replaces_contents_and_config(self):
        S = _build_store(directed=False, no_relationship=2.0)
        T = RelationStore()
        T.set_dir(9, 10, 1.0)
        result = T.assign(S)
        self.assertIs(result, T)
        self.assertEqual(T, S)
        self.assertFalse(T.directed)
        self.assertEqual(T.no_relationship, 2.0)
        T.clear()
        self.assertEqual(S.size(), 3)

    def test_assign_self_is_noop(self):
        S = _build_store()
        before = S.copy()
        self.assertIs(S.assign(S), S)
        self.assertEqual(S, before)


class TestOrdering(unittest.TestCase):
    def test_equality_is_table_equality(self):
        A = RelationStore(directed=True)
        B = RelationStore(directed=False, no_relationship=3.0)
        A.set_undir(1, 2, 1.0)
        B.set_undir(2, 1, 1.0)
        self.assertEqual(A, B)
        B.set_dir(1, 2, 2.0)
        self.assertNotEqual(A, B)

    def test_empty_store_sorts_first(self):
        A = RelationStore()
        B = _build_store()
        self.assertLess(A, B)
        self.assertFalse(B < A)

    def test_lexicographic_over_source_then_target(self):
        A = RelationStore()
        B = RelationStore()
        A.set_dir(1, 2, 1.0)
        B.set_dir(1, 3, 1.0)
        self.assertLess(A, B)
        self.assertGreater(B, A)

    def test_lexicographic_over_key_then_entry(self):
        A = RelationStore()
        B = RelationStore()
        A.set_dir(1, 2, 1.0, key="a")
        B.set_dir(1, 2, 1.0, key="b")
        self.assertLess(A, B)

        C = RelationStore()
        D = RelationStore()
        C.set_dir(1, 2, 1.0)
        D.set_dir(1, 2, 2.0)
        self.assertLess(C, D)
        self.assertLessEqual(C, C.copy())

    def test_mirror_sorts_before_outward(self):
        A = RelationStore()
        B = RelationStore()
        A.set_dir(2, 1, 1.0)  # (1, 2) is a mirror entry
        B.set_undir(2, 1, 1.0)  # (1, 2) is outward
        self.assertLess(A, B)

    def test_sorted_and_unhashable(self):
        stores = [_build_store(), RelationStore()]
        self.assertEqual(sorted(stores)[0].size(), 0)
        with self.assertRaises(TypeError):
            hash(RelationStore())

    def test_comparison_with_other_types(self):
        self.assertNotEqual(RelationStore(), {})
        with self.assertRaises(TypeError):
            RelationStore() < 3

    def test_repr(self):
        self.assertEqual(
            repr(_build_store()),
            "RelationStore(directed=True, no_relationship=0.0, vertices=3, keys=2)",
        )


class TestPackageLayout(unittest.TestCase):
    def test_lazy_top_level_symbols(self):
        import relstore

        self.assertIs(relstore.RelationStore, RelationStore)
        self.assertIs(relstore.core.store.RelationStore, RelationStore)
        self.assertIn("StoreDiff", dir(relstore))
        with self.assertRaises(AttributeError):
            relstore.not_a_symbol


if __name__ == "__main__":
    unittest.main()
