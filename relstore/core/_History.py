import inspect
import json
import time
from datetime import UTC, datetime
from functools import wraps

import numpy as np
import polars as pl

from ._StoreDiff import StoreDiff


class History:
    # History and Timeline

    def _utcnow_iso(self) -> str:
        return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")

    def _jsonify(self, x):
        # Make args/return JSON-safe & compact.

        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        if isinstance(x, (set, frozenset)):
            return sorted(self._jsonify(v) for v in x)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, (np.generic,)):
            return x.item()
        # stores and other heavy objects -> just a tag
        t = type(x).__name__
        return f"<<{t}>>"

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        self._version += 1
        evt = {
            "version": self._version,
            "ts_utc": self._utcnow_iso(),  # ISO-8601 with Z
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        # sanitize
        for k, v in fields.items():
            evt[k] = self._jsonify(v)
        self._history.append(evt)

    def _log_mutation(self, name=None):
        def deco(fn):
            op = name or fn.__name__
            sig = inspect.signature(fn)

            @wraps(fn)
            def wrapper(*args, **kwargs):
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                result = fn(*args, **kwargs)
                payload = {}
                # record all call args except 'self'
                for k, v in bound.arguments.items():
                    if k != "self":
                        payload[k] = v
                payload["result"] = result
                self._log_event(op, **payload)
                return result

            return wrapper

        return deco

    def _install_history_hooks(self):
        # Public mutators only; they delegate to unwrapped private helpers,
        # so one call logs one event.
        to_wrap = [
            "set",
            "set_dir",
            "set_undir",
            "clear",
            "clear_dir",
            "clear_undir",
            "clear_vertex",
            "clear_key",
            "assign",
        ]
        for name in to_wrap:
            if hasattr(self, name):
                fn = getattr(self, name)
                # Avoid double-wrapping
                if getattr(fn, "__wrapped__", None) is None:
                    setattr(self, name, self._log_mutation(name)(fn))

    def history(self, as_df: bool = False):
        """Return the append-only mutation history.

        Parameters
        --
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        ---
        list[dict] or polars.DataFrame
            Each event includes: 'version', 'ts_utc' (UTC ISO-8601), 'mono_ns'
            (monotonic nanoseconds since logger start), 'op', the call
            arguments, and 'result'.

        Notes
        -
        Ordering is guaranteed by 'version' and 'mono_ns'. The log is in-memory until exported.

        """
        if as_df:
            return pl.DataFrame(self._history, infer_schema_length=None)
        return list(self._history)

    def export_history(self, path: str):
        """Write the mutation history to disk.

        Parameters
        --
        path : str
            Output path. Supported extensions: '.parquet', '.ndjson' (a.k.a. '.jsonl'),
            '.json', '.csv'. Unknown extensions default to Parquet by appending '.parquet'.

        Returns
        ---
        int
            Number of events written. Returns 0 if the history is empty.

        Raises
        --
        OSError
            If the file cannot be written.

        """
        if not self._history:
            return 0
        p = str(path).lower()
        if p.endswith(".ndjson") or p.endswith(".jsonl"):
            with open(path, "w", encoding="utf-8") as f:
                for evt in self._history:
                    f.write(json.dumps(evt, ensure_ascii=False) + "\n")
            return len(self._history)
        if p.endswith(".json"):
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._history, f, ensure_ascii=False)
            return len(self._history)
        # columnar formats need a uniform schema; events differ per op
        df = pl.DataFrame(self._history, infer_schema_length=None)
        null_cols = [c for c, dt in df.schema.items() if dt == pl.Null]
        if null_cols:
            df = df.with_columns([pl.col(c).cast(pl.Utf8) for c in null_cols])
        if p.endswith(".csv"):
            df.write_csv(path)
        elif p.endswith(".parquet"):
            df.write_parquet(path)
        else:
            df.write_parquet(str(path) + ".parquet")
        return df.height

    def enable_history(self, flag: bool = True):
        """Enable or disable in-memory mutation logging."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        """Clear the in-memory mutation log.

        Notes
        -
        This does not delete any files previously exported.

        """
        self._history.clear()

    def mark(self, label: str):
        """Insert a manual marker ('op'='mark') into the mutation history."""
        self._log_event("mark", label=label)

    # Audit

    def _state_snapshot(self, label):
        relations = {(i, j, k): e.signed() for i, j, k, e in self.relations()}
        return {
            "label": label,
            "version": self._version,
            "vertex_ids": set(self._data),
            "relations": relations,
            "keys": {k for (_, _, k) in relations},
        }

    def snapshot(self, label=None):
        """Create a named snapshot of the current store state.

        Parameters
        --
        label : str, optional
            Human-readable label for snapshot (auto-generated if None)

        Returns
        ---
        dict
            Snapshot with 'label', 'version', 'timestamp', 'counts',
            'vertex_ids', 'relations' ((source, target, key) -> signed value)
            and 'keys'.

        """
        if label is None:
            label = f"snapshot_{len(self._snapshots)}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        snapshot = self._state_snapshot(label)
        snapshot["timestamp"] = datetime.now(UTC).isoformat()
        snapshot["counts"] = {
            "vertices": len(snapshot["vertex_ids"]),
            "relations": len(snapshot["relations"]),
            "keys": len(snapshot["keys"]),
        }
        self._snapshots.append(snapshot)
        return snapshot

    def diff(self, a, b=None):
        """Compare two snapshots or compare a snapshot with the current state.

        Parameters
        --
        a : str | dict | RelationStore
            First snapshot (label, snapshot dict, or store instance)
        b : str | dict | RelationStore | None
            Second snapshot. If None, compare with current state.

        Returns
        ---
        StoreDiff

        """
        snap_a = self._resolve_snapshot(a)
        snap_b = self._resolve_snapshot(b) if b is not None else self._state_snapshot("current")
        return StoreDiff(snap_a, snap_b)

    def _resolve_snapshot(self, ref):
        """Resolve snapshot reference (label, dict, or store)."""
        if isinstance(ref, dict):
            return ref
        elif isinstance(ref, str):
            for snap in self._snapshots:
                if snap["label"] == ref:
                    return snap
            raise ValueError(f"Snapshot '{ref}' not found")
        elif isinstance(ref, History):
            return ref._state_snapshot("external")
        else:
            raise TypeError(f"Invalid snapshot reference: {type(ref)}")

    def list_snapshots(self):
        """List all snapshots (label, timestamp, version, counts)."""
        return [
            {
                "label": snap["label"],
                "timestamp": snap["timestamp"],
                "version": snap["version"],
                "counts": snap["counts"],
            }
            for snap in self._snapshots
        ]
