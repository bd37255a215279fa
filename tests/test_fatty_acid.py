import unittest

from fame_ECLReporter.core.fatty_acid import (Form, ecn, hydrogens, is_saturated, mass, masses,
                                              parse_fatty_acid, unsaturation)
from fame_ECLReporter.core.model import FattyAcid, Mode


class FattyAcidAlgebraTests(unittest.TestCase):
    def test_saturation_and_counts(self):
        palmitic = FattyAcid(16)
        linoleic = FattyAcid(18, (9, 12))
        self.assertTrue(is_saturated(palmitic))
        self.assertFalse(is_saturated(linoleic))
        self.assertEqual(2, unsaturation(linoleic))
        self.assertEqual(32, hydrogens(palmitic))
        self.assertEqual(32, hydrogens(linoleic))

    def test_ecn(self):
        self.assertEqual(14, ecn(FattyAcid(18, (9, 12))))
        self.assertEqual(16, ecn(FattyAcid(16)))

    def test_masses_of_palmitic_acid_forms(self):
        fa = FattyAcid(16)
        # C16H32O2
        self.assertAlmostEqual(256.2402303, mass(fa, Form.RCOOH), places=6)
        # C17H34O2
        self.assertAlmostEqual(270.2558803, mass(fa, Form.RCOOCH3), places=6)
        # C16H31O2-
        self.assertAlmostEqual(255.2324053, mass(fa, Form.RCOO), places=6)
        # C16H31O+
        self.assertAlmostEqual(239.2374906, mass(fa, "RCO"), places=6)

    def test_equality_ignores_label(self):
        self.assertEqual(FattyAcid(18, (9,), "Methyl oleate"), FattyAcid(18, (9,), "C18:1"))
        self.assertEqual(hash(FattyAcid(18, (9,), "a")), hash(FattyAcid(18, (9,), "b")))
        self.assertNotEqual(FattyAcid(18, (9,)), FattyAcid(18, (-9,)))

    def test_lexicographic_order(self):
        acids = [FattyAcid(18, (9, 12)), FattyAcid(18, (9,)), FattyAcid(16), FattyAcid(18), FattyAcid(18, (6,))]
        self.assertEqual(
            ["16:0", "18:0", "18:1-6c", "18:1-9c", "18:2-9c,12c"],
            [str(fa) for fa in sorted(acids)],
        )


class NotationTests(unittest.TestCase):
    def test_parse_and_format(self):
        self.assertEqual(FattyAcid(16), parse_fatty_acid("16:0"))
        self.assertEqual(FattyAcid(16), parse_fatty_acid("C16:0"))
        self.assertEqual(FattyAcid(18, (9, 12)), parse_fatty_acid("18:2-9c,12c"))
        self.assertEqual(FattyAcid(18, (-9,)), parse_fatty_acid("18:1-9t"))
        self.assertEqual("18:1-9t", str(parse_fatty_acid("18:1-9t")))

    def test_positions_without_isomerism_default_to_cis(self):
        self.assertEqual(FattyAcid(20, (5, 8, 11, 14)), parse_fatty_acid("20:4-5,8,11,14"))

    def test_unknown_positions_keep_the_count(self):
        fa = parse_fatty_acid("18:1")
        self.assertEqual(1, fa.unsaturation)
        self.assertEqual("18:1", str(fa))

    def test_malformed(self):
        for text in ("", "16", "abc", "18:2-9c", "18:1-9x"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_fatty_acid(text)


class MassTableTests(unittest.TestCase):
    def test_every_form_is_listed(self):
        table = masses(FattyAcid(18, (9,)))
        self.assertEqual(set(Form), set(table))
        self.assertAlmostEqual(mass(FattyAcid(18, (9,)), Form.RCOOCH3), table[Form.RCOOCH3])
        self.assertLess(table[Form.RCO], table[Form.RCOO])


class ModeIdentityTests(unittest.TestCase):
    def test_identity_is_bitwise(self):
        self.assertEqual(Mode(70.0, 1.0), Mode(70, 1))
        self.assertNotEqual(Mode(0.0, 1.0), Mode(-0.0, 1.0))
        nan = float("nan")
        self.assertEqual(Mode(nan, 1.0), Mode(nan, 1.0))
        self.assertEqual(hash(Mode(nan, 1.0)), hash(Mode(nan, 1.0)))
        self.assertEqual(1, len({Mode(70.0, 1.0), Mode(70, 1)}))
        self.assertEqual(2, len({Mode(0.0, 1.0), Mode(-0.0, 1.0)}))

    def test_order_follows_values(self):
        self.assertLess(Mode(70.0, 5.0), Mode(100.0, 1.0))
        self.assertLess(Mode(70.0, 1.0), Mode(70.0, 2.0))
