import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config.scoring import (  # noqa: E402
    get_scoring_config,
    get_scoring_value,
    reset_scoring_config_cache,
    scoring_config_path,
    scoring_float,
    scoring_int,
)


class ScoringConfigTests(unittest.TestCase):
    def tearDown(self):
        reset_scoring_config_cache()

    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("parseability.penalties.tables"), 30)
        self.assertEqual(get_scoring_value("parseability.missing.key", "fallback"), "fallback")

    def test_calibrated_magnitudes_are_pinned(self):
        # These magnitudes are a calibration choice tuned against external benchmark
        # resumes, not a law. Change them only after re-running that benchmark.
        self.assertEqual(scoring_int("parseability.starting_score", 0), 90)
        self.assertEqual(scoring_int("parseability.penalties.scanned_image", 0), 30)
        self.assertEqual(scoring_int("parseability.penalties.no_contact", 0), 25)
        self.assertEqual(scoring_int("parseability.penalties.short_resume", 0), 15)
        self.assertEqual(scoring_int("parseability.penalties.long_resume", 0), 12)
        self.assertEqual(scoring_int("validator.thresholds.normalized_min", 0), 52)
        self.assertAlmostEqual(scoring_float("validator.multipliers.base_alignment", 0.0), 0.92)
        self.assertAlmostEqual(scoring_float("validator.multipliers.one_critical", 0.0), 0.90)
        self.assertAlmostEqual(scoring_float("validator.multipliers.multiple_critical", 0.0), 0.88)
        weights = get_scoring_value("validator.weights")
        total = sum(weights[name] for name in ("parseability", "format", "keyword", "contact", "content"))
        self.assertAlmostEqual(total, 1.0)

    def test_missing_file_raises_runtime_error(self):
        missing = Path(tempfile.gettempdir()) / "does-not-exist-scoring.yaml"
        with patch.dict(os.environ, {"SCORING_CONFIG_PATH": str(missing)}):
            reset_scoring_config_cache()
            with self.assertRaises(RuntimeError):
                get_scoring_config()

    def test_non_mapping_yaml_raises_runtime_error(self):
        tmp_file = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8")
        tmp_path = Path(tmp_file.name)
        try:
            tmp_file.write("- just\n- a list\n")
            tmp_file.close()
            with patch.dict(os.environ, {"SCORING_CONFIG_PATH": str(tmp_path)}):
                reset_scoring_config_cache()
                with self.assertRaises(RuntimeError):
                    get_scoring_config()
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def test_path_override_is_read_per_call(self):
        override = Path(tempfile.gettempdir()) / "custom-scoring.yaml"
        with patch.dict(os.environ, {"SCORING_CONFIG_PATH": str(override)}):
            self.assertEqual(scoring_config_path(), override)
        with patch.dict(os.environ, {"SCORING_CONFIG_PATH": ""}):
            self.assertEqual(scoring_config_path(), PROJECT_ROOT / "config" / "scoring.yaml")


if __name__ == "__main__":
    unittest.main()
