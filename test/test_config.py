"""
Tests for config module.
"""

import logging
import os
import tempfile

import pytest
from causal_search_core.config import PARAMETER_DEFAULTS, Parameters, configure_logging


class TestParameters:
    """Test cases for parameters and logging setup."""

    def test_defaults(self):
        """Test fallback to documented defaults"""
        parameters = Parameters()
        assert parameters["alpha"] == PARAMETER_DEFAULTS["alpha"]["default"]
        assert parameters.get_int("number_resampling") == 0
        assert parameters.get_bool("resampling_with_replacement") is True

    def test_unknown_parameter(self):
        """Test that unknown names without defaults raise KeyError"""
        with pytest.raises(KeyError):
            Parameters()["no_such_parameter"]

    def test_typed_getters(self):
        """Test coercion of stored values"""
        parameters = Parameters(alpha="0.05", depth=2.0, verbose="false")
        assert parameters.get_float("alpha") == 0.05
        assert parameters.get_int("depth") == 2
        assert parameters.get_bool("verbose") is False
        parameters.set("verbose", "maybe")
        with pytest.raises(ValueError):
            parameters.get_bool("verbose")

    def test_copy_with_overrides(self):
        """Test that copies are independent"""
        parameters = Parameters(alpha=0.05)
        copy = parameters.copy(number_resampling=0)
        copy.set("alpha", 0.1)
        assert parameters["alpha"] == 0.05
        assert copy["number_resampling"] == 0

    def test_json_round_trip(self):
        """Test saving and loading parameters"""
        parameters = Parameters(alpha=0.05, seed=7)
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "parameters.json")
            parameters.save(path)
            loaded = Parameters.load(path)
        assert loaded.to_dict() == {"alpha": 0.05, "seed": 7}

    def test_configure_logging(self):
        """Test handler setup with a log file"""
        root_logger = logging.getLogger()
        saved_handlers, saved_level = list(root_logger.handlers), root_logger.level
        try:
            with tempfile.TemporaryDirectory() as tmp_dir:
                path = os.path.join(tmp_dir, "debug.log")
                configure_logging("WARNING", path)
                assert len(root_logger.handlers) == 2
                assert root_logger.handlers[0].level == logging.WARNING
                logging.getLogger("causal_search_core.test").debug("hello")
                for handler in root_logger.handlers:
                    handler.flush()
                with open(path) as f:
                    assert "hello" in f.read()
                for handler in root_logger.handlers:
                    handler.close()
        finally:
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)


if __name__ == "__main__":
    test_instance = TestParameters()
    for name in sorted(n for n in dir(test_instance) if n.startswith("test_")):
        print(f"Running {name}...")
        getattr(test_instance, name)()
        print("✓ Passed")

    print("\nAll tests passed! 🎉")
