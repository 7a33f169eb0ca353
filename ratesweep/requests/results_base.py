"""
Base classes and mixins for result containers.

This module provides the foundation for the result containers (amounts,
point sensitivities, cash flows, explanations, curve deltas) through an
abstract base class and reusable mixins:

1. Mixins contain only methods, no instance attributes (compatible with frozen dataclasses)
2. Export methods handle conversion from NumPy and enum types to plain Python types
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional
import datetime
import json

import numpy as np
import pandas as pd


class BaseResult(ABC):
    """
    Abstract base class for result containers.

    Subclasses must provide dictionary serialization and a DataFrame view.
    """

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all relevant data
        """
        pass

    @property
    @abstractmethod
    def df(self) -> pd.DataFrame:
        """
        Convert the result to a pandas DataFrame.

        Returns:
            pd.DataFrame: Tabular representation of the result
        """
        pass


class ExportMixin:
    """
    Mixin providing export functionality to various formats.

    Requires the class to implement .to_dict() and .df.
    """

    def to_json(self, indent: Optional[int] = 2) -> str:
        """
        Export result to JSON string.

        Args:
            indent: Number of spaces for indentation (None for compact)

        Returns:
            str: JSON representation
        """
        data = self.to_dict()
        return json.dumps(self._prepare_for_json(data), indent=indent)

    def to_csv(self, filepath: Optional[str] = None) -> Optional[str]:
        """
        Export result to CSV format.

        Args:
            filepath: Optional path to save CSV file. If None, returns CSV string.

        Returns:
            str or None: CSV string if filepath is None, otherwise None
        """
        df = self.df
        if filepath:
            df.to_csv(filepath)
            return None
        else:
            return df.to_csv()

    @staticmethod
    def _prepare_for_json(obj):
        """
        Recursively convert NumPy arrays, dates and enums to JSON-serializable types.

        Args:
            obj: Object to prepare for JSON serialization

        Returns:
            JSON-serializable version of obj
        """
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, dict):
            return {ExportMixin._json_key(k): ExportMixin._prepare_for_json(v)
                    for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [ExportMixin._prepare_for_json(item) for item in obj]
        elif isinstance(obj, (np.integer, np.floating)):
            return float(obj)
        elif isinstance(obj, Enum):
            return obj.name
        elif isinstance(obj, datetime.date):
            return obj.isoformat()
        elif hasattr(obj, 'to_dict'):
            return ExportMixin._prepare_for_json(obj.to_dict())
        elif isinstance(obj, (str, int, float, bool)) or obj is None:
            return obj
        else:
            return str(obj)

    @staticmethod
    def _json_key(key):
        if isinstance(key, Enum):
            return key.name
        return str(key)
