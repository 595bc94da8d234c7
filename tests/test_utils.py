"""
Clarity Tests - Utilities
=========================

Unit tests for configuration loading/validation, series I/O, structured
logging and the command line entry point.

Author: Clarity Simulation Team
"""

import contextlib
import io
import json
import logging
import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from clarity_sim import cli
from clarity_sim.core import ContractViolation, RandomVariate
from clarity_sim.filtration import FilterLifeModel
from clarity_sim.telemetry import HistoricalSeriesBuilder, ReadingGenerator
from clarity_sim.utils import (
    ConfigError,
    StructuredFormatter,
    get_config_value,
    load_config,
    load_default_config,
    load_series,
    log_filter_state,
    log_reading,
    log_statistics,
    merge_configs,
    records_to_series,
    save_series,
    series_to_records,
    validate_config,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestConfig(unittest.TestCase):
    """Test YAML configuration handling."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, text: str) -> Path:
        path = Path(self.tmp.name) / "config.yaml"
        path.write_text(text)
        return path

    def test_default_config_is_valid(self):
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("CLARITY_SEED", None)
            os.environ.pop("CLARITY_LOG_LEVEL", None)
            config = load_default_config()

        self.assertTrue(validate_config(config))
        self.assertIsNone(get_config_value(config, "simulation.seed"))
        self.assertEqual(get_config_value(config, "simulation.history_days"), 30)
        self.assertEqual(get_config_value(config, "filter.install_days_ago"), 45)
        self.assertEqual(get_config_value(config, "live.interval_seconds"), 120)
        self.assertEqual(get_config_value(config, "logging.level"), "INFO")

    def test_env_substitution_keeps_types(self):
        with mock.patch.dict(os.environ, {"CLARITY_SEED": "42", "CLARITY_LOG_LEVEL": "DEBUG"}):
            config = load_default_config()

        self.assertEqual(config["simulation"]["seed"], 42)
        self.assertEqual(config["logging"]["level"], "DEBUG")

    def test_env_substitution_inside_text(self):
        path = self._write("filter:\n  device_id: 'dev-${CLARITY_TEST_SUFFIX:none}'\n")
        with mock.patch.dict(os.environ, {"CLARITY_TEST_SUFFIX": "7"}):
            config = load_config(path)
        self.assertEqual(config["filter"]["device_id"], "dev-7")

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(Path(self.tmp.name) / "missing.yaml")

    def test_empty_file(self):
        with self.assertRaises(ConfigError):
            load_config(self._write(""))

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("simulation: [unclosed"))

    def test_validation_errors(self):
        base = {
            "simulation": {"seed": None, "history_days": 30},
            "filter": {"install_days_ago": 45},
            "live": {"interval_seconds": 120, "startup_delay_seconds": 0.5},
        }
        self.assertTrue(validate_config(base))

        bad_values = [
            {"simulation": {"history_days": 0}},
            {"simulation": {"seed": "abc"}},
            {"filter": {"install_days_ago": -1}},
            {"live": {"interval_seconds": 0}},
            {"live": {"startup_delay_seconds": -1}},
            {"logging": {"level": "LOUD"}},
        ]
        for override in bad_values:
            with self.subTest(override=override):
                with self.assertRaises(ConfigError):
                    validate_config(merge_configs(base, override))

        with self.assertRaises(ConfigError):
            validate_config({"simulation": {}, "filter": {}})

    def test_merge_configs(self):
        merged = merge_configs(
            {"live": {"interval_seconds": 120, "startup_delay_seconds": 0.5}, "a": 1},
            {"live": {"startup_delay_seconds": 0}},
        )
        self.assertEqual(merged, {"live": {"interval_seconds": 120, "startup_delay_seconds": 0}, "a": 1})

    def test_get_config_value_default(self):
        self.assertEqual(get_config_value({}, "live.interval_seconds", 120), 120)


class TestSeriesIO(unittest.TestCase):
    """Test JSON persistence of series."""

    def setUp(self):
        rv = RandomVariate(seed=4)
        self.series = HistoricalSeriesBuilder(ReadingGenerator(rv), rv).build(2, now=NOW)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_save_and_load(self):
        path = Path(self.tmp.name) / "nested" / "series.json"
        save_series(self.series, path)

        records = json.loads(path.read_text())
        self.assertEqual(len(records), 24)
        self.assertEqual(records[-1]["timestamp"], "2025-06-15T12:00:00.000Z")
        self.assertEqual(load_series(path), self.series)

    def test_out_of_order_records_rejected(self):
        records = series_to_records(self.series)
        records.reverse()
        with self.assertRaises(ContractViolation):
            records_to_series(records)

    def test_non_object_record_rejected(self):
        with self.assertRaises(ContractViolation):
            records_to_series([["not", "a", "dict"]])

        records = series_to_records(self.series)
        records[3]["particleBreakdown"] = "small"
        with self.assertRaises(ContractViolation):
            records_to_series(records)

    def test_non_object_record_in_file_rejected(self):
        path = Path(self.tmp.name) / "mixed.json"
        path.write_text(json.dumps([series_to_records(self.series)[0], 7]))
        with self.assertRaises(ContractViolation):
            load_series(path)

    def test_non_array_file_rejected(self):
        path = Path(self.tmp.name) / "bad.json"
        path.write_text('{"timestamp": "2025-01-01T00:00:00Z"}')
        with self.assertRaises(ContractViolation):
            load_series(path)


class TestStructuredFormatter(unittest.TestCase):
    """Test the log line layout."""

    def test_format(self):
        record = logging.LogRecord(
            "clarity_sim.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None
        )
        line = StructuredFormatter().format(record)
        self.assertTrue(line.startswith("["))
        self.assertIn("[WARNING ]", line)
        self.assertIn("[clarity_sim.test] hello world", line)


class TestLogHelpers(unittest.TestCase):
    """Test the reading / filter / statistics log helpers."""

    def test_log_reading(self):
        rv = RandomVariate(seed=2)
        reading = ReadingGenerator(rv).from_particle_count(NOW, 12)

        with self.assertLogs("clarity_sim.utils.logging", level="INFO") as captured:
            log_reading(reading)

        self.assertEqual(len(captured.records), 1)
        self.assertIn("particles=12", captured.output[0])
        self.assertIn(f"score={reading.quality_score}", captured.output[0])

    def test_log_filter_state(self):
        state = FilterLifeModel(clock=lambda: NOW).compute(162)

        with self.assertLogs("clarity_sim.utils.logging", level="INFO") as captured:
            log_filter_state(state)

        self.assertIn("life=10.0%", captured.output[0])
        self.assertIn("status=replace-now", captured.output[0])

    def test_log_statistics(self):
        with self.assertLogs("clarity_sim.utils.logging", level="INFO") as captured:
            log_statistics({"totalParticles": 63, "avgQualityScore": 71, "ratio": 0.5})

        self.assertEqual(len(captured.records), 4)
        self.assertIn("Statistics Summary", captured.output[0])
        self.assertIn("avgQualityScore: 71", captured.output[2])
        self.assertIn("ratio: 0.5000", captured.output[3])


class TestCli(unittest.TestCase):
    """Test the command line entry point."""

    def setUp(self):
        root = logging.getLogger()
        saved = (root.level, root.handlers[:])

        def restore():
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            root.setLevel(saved[0])
            for handler in saved[1]:
                root.addHandler(handler)

        self.addCleanup(restore)

    def _run(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = cli.main(["--log-level", "WARNING", *argv])
        return code, out.getvalue()

    def test_filter_command(self):
        code, output = self._run("filter", "--days-ago", "162")

        self.assertEqual(code, 0)
        record = json.loads(output)
        self.assertEqual(record["lifeRemaining"], 10.0)
        self.assertEqual(record["status"], "replace-now")
        self.assertEqual(record["activationCount"], 48)

    def test_commands_log_their_results(self):
        with self.assertLogs("clarity_sim.utils.logging", level="INFO") as captured:
            self._run("filter", "--days-ago", "45")
        self.assertTrue(any("status=good" in line for line in captured.output))

        with self.assertLogs("clarity_sim.utils.logging", level="INFO") as captured:
            self._run("--seed", "9", "history", "--days", "1", "--window", "day")
        self.assertTrue(any("readingsCount: 12" in line for line in captured.output))

    def test_history_command(self):
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "series.json"
            code, output = self._run("--seed", "9", "history", "--days", "7",
                                     "--window", "week", "--output", str(target))
            saved = load_series(target)

        self.assertEqual(code, 0)
        summary = json.loads(output)
        self.assertEqual(summary["readingsCount"], 84)
        self.assertNotIn("litersFiltered", summary)
        self.assertEqual(len(saved), 84)

    def test_history_month_has_liters(self):
        code, output = self._run("--seed", "9", "history", "--days", "3")
        self.assertEqual(code, 0)
        self.assertIn("litersFiltered", json.loads(output))

    def test_invalid_days_exit_code(self):
        code, _ = self._run("filter", "--days-ago", "-5")
        self.assertEqual(code, 2)

    def test_bad_config_exit_code(self):
        with contextlib.redirect_stderr(io.StringIO()):
            code, _ = self._run("--config", "/nonexistent/clarity.yaml", "filter")
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
