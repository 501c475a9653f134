import numpy as np
import polars as pl
import scipy.sparse as sp

_RELATIONS_SCHEMA = {
    "source": pl.Int64,
    "target": pl.Int64,
    "key": pl.Utf8,
    "state": pl.Utf8,
    "outward": pl.Boolean,
    "magnitude": pl.Float64,
    "value": pl.Float64,
}


class Views:
    def relations_view(self, key=None):
        """Build a Polars DF [DataFrame] view of the stored entries.

        Parameters
        --
        key : str, optional
            Only include entries under this relation key.

        Returns
        ---
        polars.DataFrame
            One row per stored entry, mirrors included, sorted by
            (source, target, key). Columns: ``source``, ``target``, ``key``,
            ``state`` ('OUTWARD' or 'MIRROR'), ``outward``, ``magnitude`` and
            ``value`` (the signed reading returned by ``get``).

        """
        rows = [
            {
                "source": i,
                "target": j,
                "key": k,
                "state": e.state.value,
                "outward": e.outward,
                "magnitude": e.magnitude,
                "value": e.signed(),
            }
            for i, j, k, e in self.relations(key)
        ]
        if not rows:
            return pl.DataFrame(schema=_RELATIONS_SCHEMA)
        return pl.DataFrame(rows, schema=_RELATIONS_SCHEMA)

    def vertex_index(self):
        """Sorted vertex ids; the default row/column order of ``adjacency_matrix``."""
        return sorted(self._data)

    def adjacency_matrix(self, key="", vertices=None, sparse=True):
        """Return the signed adjacency matrix of one relation key.

        Parameters
        --
        key : str, optional
            Relation key, default ``""``.
        vertices : list[int], optional
            Row/column order. Defaults to ``vertex_index()``. Vertices not in
            the store get empty rows and columns.
        sparse : bool, optional (default=True)
            If True return SciPy CSR, otherwise a dense NumPy ndarray.

        Returns
        ---
        scipy.sparse.csr_matrix | numpy.ndarray
            ``A[r, c]`` is ``get(vertices[r], vertices[c], key)`` where an entry
            exists and ``0`` elsewhere, whatever ``no_relationship`` is.

        """
        order = self.vertex_index() if vertices is None else list(dict.fromkeys(vertices))
        pos = {v: n for n, v in enumerate(order)}
        rows, cols, vals = [], [], []
        for v in order:
            for j, rels in self._data.get(v, {}).items():
                entry = rels.get(key)
                if entry is None or j not in pos:
                    continue
                rows.append(pos[v])
                cols.append(pos[j])
                vals.append(entry.signed())
        n = len(order)
        A = sp.csr_matrix(
            (
                np.asarray(vals, dtype=np.float64),
                (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64)),
            ),
            shape=(n, n),
        )
        if sparse:
            return A
        return A.toarray()
