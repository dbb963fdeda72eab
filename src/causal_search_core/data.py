"""
Data Module

In-memory tabular datasets for searches, with the row draws used by
resampling and stability selection.
"""

import threading
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from causal_search_core.knowledge import Knowledge

DISCRETE_MISSING_VALUE = -99


class CategoryInterner:
    """
    Shares one category tuple per distinct category list, so discrete
    variables built from many resampled datasets do not duplicate them.
    Safe to use from several worker threads.
    """

    def __init__(self):
        self._categories: Dict[tuple, tuple] = {}
        self._lock = threading.Lock()

    def intern(self, categories: Iterable[str]) -> tuple:
        key = tuple(categories)
        with self._lock:
            return self._categories.setdefault(key, key)

    def clear(self) -> None:
        with self._lock:
            self._categories.clear()

    def __len__(self):
        return len(self._categories)


class DiscreteVariable:
    """A named discrete variable whose values index into its categories."""

    def __init__(self, name: str, categories: Iterable[str], interner: Optional[CategoryInterner] = None):
        self.name = name
        self.categories = interner.intern(categories) if interner is not None else tuple(categories)

    def get_num_categories(self) -> int:
        return len(self.categories)

    def get_index(self, category: str) -> int:
        """Index of category, or DISCRETE_MISSING_VALUE if it is not one of ours."""
        try:
            return self.categories.index(category)
        except ValueError:
            return DISCRETE_MISSING_VALUE

    def __repr__(self):
        return f"DiscreteVariable({self.name}, {list(self.categories)})"


class DataSet:
    """
    A rows x columns data matrix with variable names and optional knowledge.

    Continuous data marks missing cells with NaN; discrete data uses
    DISCRETE_MISSING_VALUE.
    """

    def __init__(
        self,
        matrix: np.ndarray,
        variable_names: Optional[Sequence[str]] = None,
        knowledge: Optional[Knowledge] = None,
        discrete: bool = False
    ):
        matrix = np.asarray(matrix, dtype=int if discrete else float)
        if matrix.ndim != 2:
            raise ValueError(f"Data matrix must be 2-dimensional, got shape {matrix.shape}")

        if variable_names is None:
            variable_names = [f"X{i + 1}" for i in range(matrix.shape[1])]
        variable_names = list(variable_names)
        if len(variable_names) != matrix.shape[1]:
            raise ValueError(f"Expected {matrix.shape[1]} variable names, got {len(variable_names)}")
        if len(set(variable_names)) != len(variable_names):
            raise ValueError("Variable names must be unique")

        self.matrix = matrix
        self.variable_names: List[str] = variable_names
        self.knowledge = knowledge if knowledge is not None else Knowledge(variable_names)
        self.discrete = discrete

    @property
    def num_rows(self) -> int:
        return self.matrix.shape[0]

    @property
    def num_columns(self) -> int:
        return self.matrix.shape[1]

    def column(self, name: str) -> np.ndarray:
        return self.matrix[:, self.variable_names.index(name)]

    def is_missing(self) -> np.ndarray:
        """Boolean mask of missing cells."""
        if self.discrete:
            return self.matrix == DISCRETE_MISSING_VALUE
        return np.isnan(self.matrix)

    def subset_rows(self, rows: Sequence[int]) -> "DataSet":
        """New dataset with the given rows (repeats allowed) and a private knowledge copy."""
        return DataSet(self.matrix[np.asarray(rows, dtype=int)], self.variable_names,
                       self.knowledge.copy(), self.discrete)

    def subset_columns(self, names: Sequence[str]) -> "DataSet":
        indices = [self.variable_names.index(name) for name in names]
        return DataSet(self.matrix[:, indices], names, self.knowledge.copy(), self.discrete)

    def bootstrap_sample(self, size: int, rng: np.random.RandomState) -> "DataSet":
        """Draw size rows with replacement."""
        if size <= 0:
            raise ValueError(f"Sample size must be positive, got {size}")
        return self.subset_rows(rng.randint(0, self.num_rows, size=size))

    def resample_without_replacement(self, size: int, rng: np.random.RandomState) -> "DataSet":
        """Draw size distinct rows."""
        if not 0 < size <= self.num_rows:
            raise ValueError(f"Subsample size must be in (0, {self.num_rows}], got {size}")
        return self.subset_rows(rng.choice(self.num_rows, size=size, replace=False))

    def copy(self) -> "DataSet":
        return DataSet(self.matrix.copy(), self.variable_names, self.knowledge.copy(), self.discrete)

    def __repr__(self):
        return f"DataSet({self.num_rows} rows x {self.num_columns} columns)"
