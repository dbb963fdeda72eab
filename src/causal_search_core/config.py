"""
Configuration Module

Named search parameters with documented defaults, JSON persistence, and
a logging setup helper for scripts.
"""

import json
import logging
import sys
from typing import Any, Dict, Iterator, Mapping, Optional

PARAMETER_DEFAULTS: Dict[str, Dict[str, Any]] = {
    # Search
    "alpha": {"default": 0.01, "description": "Significance level for independence tests"},
    "depth": {"default": -1, "description": "Maximum conditioning set size (-1 for unlimited)"},

    # Resampling
    "number_resampling": {"default": 0, "description": "Number of resampled datasets to search (0 for none)"},
    "percent_resample_size": {"default": 100, "description": "Resample size as a percentage of the row count"},
    "resampling_with_replacement": {"default": True, "description": "Bootstrap (True) or subsample (False)"},
    "add_original_dataset": {"default": False, "description": "Also search the full original dataset"},
    "run_parallel": {"default": True, "description": "Run resampled searches on the shared worker pool"},
    "seed": {"default": -1, "description": "Random seed for resampling (-1 for unseeded)"},
    "verbose": {"default": False, "description": "Show progress and per-run details"},

    # StARS
    "num_subsamples": {"default": 8, "description": "Number of subsamples used by StARS"},
    "percent_subsample_size": {"default": 50, "description": "StARS subsample size as a percentage of the rows"},
    "stars_cutoff": {"default": 0.05, "description": "Instability cutoff for StARS"},
    "log_scale": {"default": False, "description": "Treat StARS lambda values as log10 of the parameter"},

    # Simulation
    "num_measures": {"default": 10, "description": "Number of measured variables"},
    "num_latents": {"default": 0, "description": "Number of latent variables"},
    "avg_degree": {"default": 2.0, "description": "Average node degree of simulated graphs"},
    "max_degree": {"default": 100, "description": "Maximum node degree of simulated cyclic graphs"},
    "prob_cycle": {"default": 0.2, "description": "Per-node probability of closing a directed cycle in cyclic graphs"},
    "sample_size": {"default": 1000, "description": "Number of rows of simulated data"},
    "coef_low": {"default": 0.1, "description": "Lower bound of absolute edge coefficients"},
    "coef_high": {"default": 2.0, "description": "Upper bound of absolute edge coefficients"},
    "noise_variance": {"default": 1.0, "description": "Variance of Gaussian noise terms"},
    "num_runs": {"default": 1, "description": "Number of simulated datasets"},
    "edge_probability": {"default": -1.0, "description": "Edge probability (-1 to derive it from avg_degree)"},
}


class Parameters(Mapping):
    """
    Parameter values with fallback to PARAMETER_DEFAULTS.

    Unknown names with no default raise KeyError.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs):
        self._values: Dict[str, Any] = {}
        self._values.update(values or {})
        self._values.update(kwargs)

    def __getitem__(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if name in PARAMETER_DEFAULTS:
            return PARAMETER_DEFAULTS[name]["default"]
        raise KeyError(f"Unknown parameter: {name}")

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def set(self, name: str, value: Any) -> "Parameters":
        self._values[name] = value
        return self

    def get_int(self, name: str) -> int:
        return int(self[name])

    def get_float(self, name: str) -> float:
        return float(self[name])

    def get_bool(self, name: str) -> bool:
        value = self[name]
        if isinstance(value, str):
            if value.lower() in ("true", "1", "yes"):
                return True
            if value.lower() in ("false", "0", "no"):
                return False
            raise ValueError(f"Parameter {name} is not a boolean: {value!r}")
        return bool(value)

    def copy(self, **overrides) -> "Parameters":
        """Independent copy with some values replaced."""
        return Parameters(self._values, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    @classmethod
    def load(cls, path: str) -> "Parameters":
        with open(path, 'r') as f:
            return cls(json.load(f))

    def save(self, path: str) -> None:
        with open(path, 'w') as f:
            json.dump(self._values, f, indent=2)

    def __repr__(self):
        return f"Parameters({self._values})"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging for scripts that use this library.

    Args:
        level: Logging level for the terminal handler
        log_file: Optional path of a file that receives DEBUG and above
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(getattr(logging, level.upper()))
    terminal_handler.setFormatter(formatter)
    root_logger.addHandler(terminal_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
