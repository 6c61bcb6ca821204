import contextlib
import io
from pathlib import Path
import tempfile
import unittest

import pandas as pd
from scipy.io import loadmat

from zenon_log_stats.core.pipeline import RunCfg, prepare_config, process_file
from zenon_log_stats.main import main
from zenon_log_stats.utils.paths import stats_output_path

SAMPLE = """\
-VARIABLES-
1=100
2=50
-VALUES-
@1:5.5;0;01.01.2024 10:00:00.000
@2:7;0;01.01.2024 10:30:00.000
@1:2.2;0;01.01.2024 11:00:00.000
@1:abc;0;01.01.2024 11:30:00.000
@1:9.9;0;01.01.2024 12:00:00.000
"""

EXPECTED = [
    "50;7;01.01.2024 10:30:00.000;7;01.01.2024 10:30:00.000",
    "100;2.2;01.01.2024 11:00:00.000;9.9;01.01.2024 12:00:00.000",
]


class OutputPathTests(unittest.TestCase):
    def test_extension_replaced(self):
        self.assertEqual(Path("A1_stats.txt"), stats_output_path(Path("A1.TXT")))
        self.assertEqual(Path("logs/run.2_stats.txt"), stats_output_path(Path("logs/run.2.log")))
        self.assertEqual(Path("export_stats.txt"), stats_output_path(Path("export")))
        self.assertEqual(Path("d/x.out"), stats_output_path(Path("d/x.txt"), suffix=".out"))


class ProcessFileTests(unittest.TestCase):
    def test_writes_sorted_stats_next_to_input(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.TXT"
            in_path.write_text(SAMPLE, encoding="utf-8")
            events = []

            written = process_file(in_path, {}, sink=events.append)

            out_path = Path(tmpdir) / "A1_stats.txt"
            self.assertEqual([out_path], written)
            self.assertEqual(EXPECTED, out_path.read_text(encoding="utf-8").splitlines())
            self.assertEqual(["invalid_value"], [e.kind for e in events])

            df = pd.read_csv(out_path, sep=";", header=None, dtype=str)
            self.assertEqual(["50", "100"], df[0].tolist())

    def test_bom_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "bom.txt"
            in_path.write_bytes(b"\xef\xbb\xbf" + SAMPLE.encode("utf-8"))
            written = process_file(in_path, {}, sink=lambda d: None)
            self.assertEqual(EXPECTED, written[0].read_text(encoding="utf-8").splitlines())

    def test_no_values_gives_empty_output(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "empty.txt"
            in_path.write_text("-VARIABLES-\n1=100\n", encoding="utf-8")
            written = process_file(in_path, {})
            self.assertEqual("", written[0].read_text(encoding="utf-8"))

    def test_missing_input_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "missing.txt"
            self.assertIsNone(process_file(in_path, {}))
            self.assertEqual([], list(Path(tmpdir).iterdir()))

    def test_read_error_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "broken.txt"
            in_path.write_bytes(b"-VARIABLES-\n1=100\n\xff\xfe\x00bad\n")
            self.assertIsNone(process_file(in_path, {}))
            self.assertFalse((Path(tmpdir) / "broken_stats.txt").exists())

    def test_write_error_is_reported(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            (Path(tmpdir) / "A1_stats.txt").mkdir()
            self.assertIsNone(process_file(in_path, {}, sink=lambda d: None))

    def test_mat_report(self):
        cfg = {"reports": {"mat": True, "mat_variable": "stats"}}
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            written = process_file(in_path, cfg, sink=lambda d: None)

            mat_path = Path(tmpdir) / "A1_stats.mat"
            self.assertEqual([Path(tmpdir) / "A1_stats.txt", mat_path], written)
            stats = loadmat(mat_path, squeeze_me=True, simplify_cells=True)["stats"]
            self.assertEqual([50.0, 100.0], list(stats["variable_id"]))
            self.assertEqual([7.0, 2.2], list(stats["min_value"]))
            self.assertEqual("01.01.2024 12:00:00.000", stats["max_timestamp"][1])

    def test_text_report_written_without_mat(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            written = process_file(in_path, {"reports": {"mat": False}}, sink=lambda d: None)
            self.assertEqual([Path(tmpdir) / "A1_stats.txt"], written)
            self.assertFalse((Path(tmpdir) / "A1_stats.mat").exists())

    def test_bad_config_rejected_before_reading(self):
        for cfg in ({"reports": {"mat": "yes"}}, {"reports": "mat"}, {"sections": "-VALUES-"}, ["input"]):
            with self.assertRaises(ValueError):
                prepare_config(cfg)
        self.assertEqual(RunCfg(), prepare_config(None))

    def test_oversized_variable_id_does_not_abort(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text("-VARIABLES-\n1=" + "9" * 5000 + "\n" + SAMPLE, encoding="utf-8")
            events = []
            written = process_file(in_path, {}, sink=events.append)
            self.assertEqual(EXPECTED, written[0].read_text(encoding="utf-8").splitlines())
            self.assertEqual("invalid_variable_id", events[0].kind)


class MainTests(unittest.TestCase):
    def test_no_argument_prints_usage(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            rc = main([])
        self.assertEqual(0, rc)
        self.assertIn("Usage:", buf.getvalue())

    def test_missing_file_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertEqual(1, main([str(Path(tmpdir) / "nope.txt")]))

    def test_processes_file_with_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            cfg_path = Path(tmpdir) / "cfg.yaml"
            cfg_path.write_text("output:\n  suffix: .stats\n", encoding="utf-8")

            self.assertEqual(0, main([str(in_path), "--config", str(cfg_path)]))
            out_path = Path(tmpdir) / "A1.stats"
            self.assertEqual(EXPECTED, out_path.read_text(encoding="utf-8").splitlines())

    def test_missing_config_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            self.assertEqual(1, main([str(in_path), "--config", str(Path(tmpdir) / "none.yaml")]))

    def test_config_must_be_a_mapping(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text(SAMPLE, encoding="utf-8")
            for body in ("- a\n- b\n", "just text\n", "sections: -VALUES-\n"):
                cfg_path = Path(tmpdir) / "cfg.yaml"
                cfg_path.write_text(body, encoding="utf-8")
                buf = io.StringIO()
                with contextlib.redirect_stdout(buf):
                    rc = main([str(in_path), "--config", str(cfg_path)])
                self.assertEqual(1, rc, body)
                self.assertIn("could not load config", buf.getvalue())
            self.assertFalse((Path(tmpdir) / "A1_stats.txt").exists())

    def test_oversized_variable_id_via_cli(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            in_path = Path(tmpdir) / "A1.txt"
            in_path.write_text("-VARIABLES-\n1=" + "9" * 5000 + "\n" + SAMPLE, encoding="utf-8")
            self.assertEqual(0, main([str(in_path)]))
            self.assertEqual(EXPECTED, (Path(tmpdir) / "A1_stats.txt").read_text(encoding="utf-8").splitlines())


if __name__ == "__main__":
    unittest.main()
