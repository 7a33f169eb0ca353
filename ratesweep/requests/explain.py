"""
Present value explanation.

An ExplainMap is an ordered mapping from ExplainKey to a value. Nested
breakdowns (legs of a swap, payment periods of a leg, accrual periods of a
payment) are lists of ExplainMap under the LEGS, PAYMENT_PERIODS,
PAYMENT_EVENTS and ACCRUAL_PERIODS keys. The map is built once and never
modified; it is meant for audit and debugging, not for valuation.

Example:
    >>> explain = pricer.explain_present_value(swap, env)
    >>> explain[ExplainKey.LEGS][0][ExplainKey.PRESENT_VALUE]
    >>> print(explain.table())
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

import pandas as pd

from ratesweep.utils.error import LibError
from ratesweep.utils.global_types import ExplainKey
from ratesweep.utils.helpers import format_table
from ratesweep.requests.results_base import BaseResult, ExportMixin

_NESTED_KEYS = (ExplainKey.LEGS,
                ExplainKey.PAYMENT_PERIODS,
                ExplainKey.PAYMENT_EVENTS,
                ExplainKey.ACCRUAL_PERIODS)

###############################################################################


class ExplainMap(BaseResult, ExportMixin):

    def __init__(self, entries: Optional[List[Tuple[ExplainKey, Any]]] = None):
        self._map = {}  # type: Dict[ExplainKey, Any]
        for key, value in (entries or []):
            if not isinstance(key, ExplainKey):
                raise LibError(f"Explain key must be ExplainKey, got {key!r}")
            if key in _NESTED_KEYS:
                value = tuple(value)
            self._map[key] = value

    def __getitem__(self, key: ExplainKey):
        return self._map[key]

    def get(self, key: ExplainKey, default=None):
        return self._map.get(key, default)

    def __contains__(self, key: ExplainKey) -> bool:
        return key in self._map

    def keys(self):
        return self._map.keys()

    def items(self):
        return self._map.items()

    def __iter__(self) -> Iterator[ExplainKey]:
        return iter(self._map)

    def __len__(self):
        return len(self._map)

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for key, value in self._map.items():
            if key in _NESTED_KEYS:
                out[key.name] = [child.to_dict() for child in value]
            else:
                out[key.name] = value
        return out

    def _rows(self, path: str) -> List[Tuple[str, str, Any]]:
        rows = []
        for key, value in self._map.items():
            if key in _NESTED_KEYS:
                for i, child in enumerate(value):
                    rows.extend(child._rows(f"{path}{key.name}[{i}]."))
            else:
                rows.append((path.rstrip("."), key.name, value))
        return rows

    @property
    def df(self) -> pd.DataFrame:
        """ One row per scalar entry, with the path of nested maps. """
        return pd.DataFrame(self._rows(""), columns=["path", "key", "value"])

    def table(self) -> str:
        rows = [[p, k, v] for p, k, v in self._rows("")]
        return str(format_table(["PATH", "KEY", "VALUE"], rows))

    def __repr__(self):
        return f"ExplainMap({', '.join(k.name for k in self._map)})"

###############################################################################
