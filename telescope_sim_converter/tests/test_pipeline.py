import unittest
import tempfile
from pathlib import Path

import numpy as np

from telescope_sim_converter.config import ConverterConfig
from telescope_sim_converter.export.reader import read_artifact
from telescope_sim_converter.pipeline import convert_batch, convert_file


GOOD_NAME = "p1.0MeV_9x1.E+06_ptel.j3.txt"


def _rows(ids, rng):
    mat = rng.uniform(-50.0, 50.0, size=(len(ids), 10))
    mat[:, 0] = ids
    return mat


def _write_log(path: Path, blocks, header=("run header line\n", "seed 42\n"), tail=""):
    parts = list(header)
    for mat in blocks:
        parts.append("@@ start of block\n")
        for row in mat:
            parts.append(" ".join(repr(float(v)) for v in row) + "\n")
        parts.append("@@ end of block\n")
    parts.append(tail)
    path.write_text("".join(parts), encoding="ascii")


class TestConvertFile(unittest.TestCase):
    def test_single_file_roundtrip(self):
        rng = np.random.default_rng(0)
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            b1 = _rows([1, 2, 3], rng)
            b2 = _rows([10, 11, 12, 13, 14], rng)
            src = root / GOOD_NAME
            _write_log(src, [b1, b2])

            out_dir = root / "out"
            cfg = ConverterConfig(output_dir=out_dir, operator="tester")
            outcome = convert_file(src, cfg)

            self.assertTrue(outcome.ok, outcome.message)
            self.assertEqual(outcome.output_path, out_dir / "ptel_p1.0MeV_3.bin")
            self.assertEqual(outcome.n_events, 8)
            self.assertEqual(outcome.warnings, ())

            art = read_artifact(outcome.output_path)
            mat = np.vstack([b1, b2])
            np.testing.assert_array_equal(art.event_id, [1, 2, 3, 10, 11, 12, 13, 14])
            np.testing.assert_array_equal(art.position3.view(np.uint64), mat[:, 1:4].T.copy().view(np.uint64))
            np.testing.assert_array_equal(art.momentum3.view(np.uint64), mat[:, 4:7].T.copy().view(np.uint64))
            np.testing.assert_array_equal(art.energy3.view(np.uint64), mat[:, 7:10].T.copy().view(np.uint64))

            params = art.run_parameters_dict()
            self.assertEqual(params["job_id"], 3)
            self.assertEqual(params["start_energy_kev"], 1000)
            self.assertEqual(params["n_steps"], 9)
            self.assertEqual(params["events_per_step"], 1_000_000)
            self.assertEqual(params["source_mtime"], int(src.stat().st_mtime))

            self.assertEqual(art.header, b"run header line\nseed 42\n")
            self.assertIn("Operator      : tester", art.descriptor)
            self.assertIn(GOOD_NAME, art.descriptor)

    def test_default_output_next_to_source(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            _write_log(src, [_rows([1], np.random.default_rng(1))])
            outcome = convert_file(src)
            self.assertEqual(outcome.output_path, Path(d).resolve() / "ptel_p1.0MeV_3.bin")
            self.assertTrue(outcome.output_path.exists())

    def test_truncated_file_still_converted(self):
        rng = np.random.default_rng(2)
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            _write_log(src, [_rows([1, 2], rng)], tail="@@ start of block\n1 2 3 4 5 6 7 8 9 10\n")
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d) / "out"))
            self.assertTrue(outcome.ok)
            self.assertEqual(outcome.n_events, 2)
            self.assertTrue(any(w.startswith("TruncatedFile") for w in outcome.warnings))

    def test_empty_dataset_skipped_without_artifact(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            src.write_text("header\n@@\n@@\n", encoding="ascii")
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d) / "out"))
            self.assertEqual(outcome.status, "skipped")
            self.assertEqual(outcome.reason, "EmptyDataset")
            self.assertIsNone(outcome.output_path)
            self.assertFalse((Path(d) / "out").exists())

    def test_bad_row_skipped(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            src.write_text("@@\n1 2 3\n@@\n", encoding="ascii")
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d)))
            self.assertEqual(outcome.status, "skipped")
            self.assertEqual(outcome.reason, "BlockFormat")

    def test_unparsable_name_skipped_by_default(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "p1.0TeV_9x1.E+06_ptel.j3.txt"
            _write_log(src, [_rows([1], np.random.default_rng(3))])
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d) / "out"))
            self.assertEqual(outcome.status, "skipped")
            self.assertEqual(outcome.reason, "UnrecognizedEnergyUnit")
            self.assertIsNone(outcome.metadata)

    def test_unparsable_name_with_placeholder_metadata(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "weird_name.txt"
            _write_log(src, [_rows([1], np.random.default_rng(4))])
            cfg = ConverterConfig(output_dir=Path(d) / "out", placeholder_metadata=True)
            outcome = convert_file(src, cfg)
            self.assertTrue(outcome.ok)
            self.assertEqual(outcome.output_path.name, "utel_u0keV_0.bin")
            self.assertTrue(any("MalformedFilename" in w for w in outcome.warnings))
            art = read_artifact(outcome.output_path)
            np.testing.assert_array_equal(art.run_parameters[:4], [0, 0, 0, 0])

    def test_inexact_event_id_skipped(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            src.write_bytes(b"@@\n1 0 0 0 0 0 1 10 0 0\nnan 0 0 0 0 0 1 10 0 0\n@@\n")
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d) / "out"))
            self.assertEqual(outcome.status, "skipped")
            self.assertEqual(outcome.reason, "BlockFormat")
            self.assertIn("event id", outcome.message)
            self.assertFalse((Path(d) / "out").exists())

    def test_non_ascii_header_kept_verbatim(self):
        preamble = b"Operateur: J\xc3\xa9r\xf4me\r\nG4 \xe2\x80\x94 seed 9\n"
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / GOOD_NAME
            src.write_bytes(preamble + b"@@\n1 0 0 0 0 0 1 10 0 0\n@@\n")
            outcome = convert_file(src, ConverterConfig(output_dir=Path(d) / "out"))
            self.assertTrue(outcome.ok, outcome.message)
            self.assertEqual(read_artifact(outcome.output_path).header, preamble)

    def test_missing_file_fails(self):
        with tempfile.TemporaryDirectory() as d:
            outcome = convert_file(Path(d) / GOOD_NAME)
            self.assertEqual(outcome.status, "failed")
            self.assertEqual(outcome.reason, "IOError")


class TestConvertBatch(unittest.TestCase):
    def test_batch_continues_past_failures(self):
        rng = np.random.default_rng(5)
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            _write_log(root / "e250keV_4x1.E+05_etel.j1.txt", [_rows([1, 2], rng)])
            _write_log(root / "e250keV_4x1.E+05_etel.j2.txt", [])
            _write_log(root / "e250keV_4x1.E+05_etel.txt", [_rows([5], rng)])
            _write_log(root / "p1.0MeV_9x1.E+06_ptel.j3.txt", [_rows([7, 8, 9], rng)])
            (root / "notes.md").write_text("not a log", encoding="ascii")

            out = root / "out"
            report = convert_batch(root, ConverterConfig(output_dir=out))

            self.assertFalse(report.invalid_source)
            self.assertEqual(len(report.outcomes), 4)
            by_name = {o.source_path.name: o for o in report.outcomes}
            self.assertTrue(by_name["e250keV_4x1.E+05_etel.j1.txt"].ok)
            self.assertEqual(by_name["e250keV_4x1.E+05_etel.j2.txt"].reason, "EmptyDataset")
            self.assertEqual(by_name["e250keV_4x1.E+05_etel.txt"].reason, "MalformedFilename")
            last = by_name["p1.0MeV_9x1.E+06_ptel.j3.txt"]
            self.assertTrue(last.ok)
            self.assertEqual(last.metadata.telescope_type, "ptel")
            self.assertEqual(last.metadata.start_energy_kev, 1000.0)

            self.assertEqual(
                sorted(p.name for p in out.iterdir()),
                ["etel_e250keV_1.bin", "ptel_p1.0MeV_3.bin"],
            )
            self.assertEqual(len(report.succeeded), 2)
            self.assertEqual(len(report.not_converted), 2)
            self.assertIn("2/4", report.summary())

    def test_oversized_filename_values_do_not_abort_batch(self):
        rng = np.random.default_rng(9)
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            _write_log(root / "ainfMeV_3x1000_ptel.j1.txt", [_rows([1], rng)])
            _write_log(root / "p1MeV_99999999999999999999x1000_ptel.j2.txt", [_rows([2], rng)])
            _write_log(root / "p1MeV_3x1000_ptel.j3.txt", [_rows([3], rng)])

            report = convert_batch(root, ConverterConfig(output_dir=root / "out"))

            by_name = {o.source_path.name: o for o in report.outcomes}
            self.assertEqual(len(by_name), 3)
            self.assertEqual(by_name["ainfMeV_3x1000_ptel.j1.txt"].reason, "MalformedFilename")
            self.assertEqual(by_name["p1MeV_99999999999999999999x1000_ptel.j2.txt"].reason, "MalformedFilename")
            self.assertTrue(by_name["p1MeV_3x1000_ptel.j3.txt"].ok)
            self.assertEqual([p.name for p in (root / "out").iterdir()], ["ptel_p1MeV_3.bin"])

    def test_single_file_source_ignores_pattern(self):
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "p1.0MeV_9x1.E+06_ptel.j3.dat"
            _write_log(src, [_rows([1], np.random.default_rng(6))])
            report = convert_batch(src, ConverterConfig(output_dir=Path(d) / "out", data_suffix=".dat"))
            self.assertEqual(len(report.outcomes), 1)
            self.assertTrue(report.outcomes[0].ok)

    def test_invalid_source(self):
        with tempfile.TemporaryDirectory() as d:
            report = convert_batch(Path(d))
            self.assertTrue(report.invalid_source)
            self.assertTrue(report.warnings[0].startswith("InvalidSource"))

            report = convert_batch(Path(d) / "does_not_exist")
            self.assertTrue(report.invalid_source)

    def test_collision_overwrites_and_warns(self):
        rng = np.random.default_rng(8)
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            _write_log(root / "p1.0MeV_9x1.E+06_ptel.j3", [_rows([1], rng)])
            _write_log(root / "p1.0MeV_9x1.E+06_ptel.j3.txt", [_rows([2, 3], rng)])
            report = convert_batch(root, ConverterConfig(pattern="p*", output_dir=root / "out"))

            self.assertTrue(all(o.ok for o in report.outcomes))
            first, second = report.outcomes
            self.assertEqual(first.output_path, second.output_path)
            self.assertEqual(first.warnings, ())
            self.assertTrue(any("overwritten" in w for w in second.warnings))
            art = read_artifact(second.output_path)
            np.testing.assert_array_equal(art.event_id, [2, 3])


if __name__ == "__main__":
    unittest.main()
