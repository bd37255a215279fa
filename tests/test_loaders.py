import tempfile
import textwrap
import unittest
from pathlib import Path

from fame_ECLReporter.core.errors import MissingColumn, TypeMismatch
from fame_ECLReporter.core.model import FattyAcid, Table
from fame_ECLReporter.core.normalize import stack
from fame_ECLReporter.loaders import table_loader
from fame_ECLReporter.utils.detect import detect_kind, discover_inputs

from fame_fixtures import C16, MODE, make_df, reference_rows

CSV = textwrap.dedent("""\
    Mode.OnsetTemperature,Mode.TemperatureStep,FattyAcid.Carbons,FattyAcid.Indices,FattyAcid.Label,Time
    70,1,16,,Methyl palmitate,76.9;77.1
    70,1,18,9;12,Methyl linoleate,89.2;;89.4
    70,1,18,-9,Methyl elaidate,88.1
""")

YAML = textwrap.dedent("""\
    rows:
      - Mode: {OnsetTemperature: 70, TemperatureStep: 1}
        FattyAcid: {Carbons: 16, Indices: [], Label: Methyl palmitate}
        Time: [76.9, 77.1]
      - Mode: {OnsetTemperature: 70, TemperatureStep: 1}
        FattyAcid: {Carbons: 18, Indices: [9], Label: Methyl oleate}
        Time: [88.0, null]
""")


class TableLoaderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> Path:
        p = self.root / name
        p.write_text(text, encoding="utf-8")
        return p

    def test_csv_with_list_cells_and_missing_replicate(self):
        table = table_loader.load(self._write("run.csv", CSV))
        self.assertEqual("measurements", table.name)
        self.assertEqual(3, len(table))
        palmitic, linoleic, elaidic = table.rows
        self.assertEqual(C16, palmitic.fatty_acid)
        self.assertEqual(MODE, palmitic.mode)
        self.assertEqual((76.9, 77.1), palmitic.times)
        self.assertEqual(FattyAcid(18, (9, 12)), linoleic.fatty_acid)
        self.assertEqual((89.2, None, 89.4), linoleic.times)
        self.assertEqual((-9,), elaidic.fatty_acid.indices)
        self.assertEqual("Methyl elaidate", elaidic.fatty_acid.label)

    def test_yaml_rows(self):
        table = table_loader.load(self._write("run.yaml", YAML))
        self.assertEqual(2, len(table))
        self.assertEqual(FattyAcid(18, (9,)), table[1].fatty_acid)
        self.assertEqual((88.0, None), table[1].times)

    def test_empty_yaml_is_an_empty_table(self):
        self.assertTrue(table_loader.load(self._write("empty.yaml", "rows: []\n")).empty)

    def test_yaml_of_wrong_shape(self):
        with self.assertRaises(TypeMismatch):
            table_loader.load(self._write("bad.yaml", "just a string\n"))

    def test_csv_without_time(self):
        text = "Mode.OnsetTemperature,Mode.TemperatureStep,FattyAcid.Carbons,FattyAcid.Indices\n70,1,16,\n"
        with self.assertRaises(MissingColumn):
            table_loader.load(self._write("bad.csv", text))

    def test_saved_tables_load_back(self):
        original = Table("measurements", tuple(reference_rows(88.0)))
        for name in ("m.csv", "m.yaml", "m.pkl"):
            with self.subTest(name=name):
                loaded = table_loader.load(table_loader.save(original, self.root / name))
                self.assertEqual([(r.mode, r.fatty_acid) for r in original],
                                 [(r.mode, r.fatty_acid) for r in loaded])
                self.assertEqual("Methyl oleate", loaded[3].fatty_acid.label)

    def test_pickled_frame(self):
        path = self.root / "frame.pkl"
        make_df(reference_rows()).to_pickle(path)
        self.assertEqual(4, len(table_loader.load(path)))

    def test_stacking_keeps_every_row(self):
        a = table_loader.load(self._write("a.csv", CSV))
        b = table_loader.load(self._write("b.yaml", YAML))
        self.assertEqual(5, len(stack(a, b)))


class DetectTests(unittest.TestCase):
    def test_detect_kind(self):
        self.assertEqual("csv", detect_kind(Path("x.CSV")))
        self.assertEqual("yaml", detect_kind(Path("x.yml")))
        self.assertEqual("bin", detect_kind(Path("x.pkl")))
        self.assertEqual("unknown", detect_kind(Path("x.txt")))

    def test_discover_skips_output_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "nested").mkdir()
            (root / "output").mkdir()
            (root / "a.csv").write_text("x", encoding="utf-8")
            (root / "nested" / "b.yaml").write_text("x", encoding="utf-8")
            (root / "output" / "report.csv").write_text("x", encoding="utf-8")
            (root / "notes.txt").write_text("x", encoding="utf-8")

            found = discover_inputs(root, recurse=True, exclude=root / "output")
            self.assertEqual(["a.csv", "b.yaml"], [d.path.name for d in found])
            flat = discover_inputs(root, recurse=False, exclude=root / "output")
            self.assertEqual(["a.csv"], [d.path.name for d in flat])
