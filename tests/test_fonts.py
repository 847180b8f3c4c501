import unittest

from fonts import BuiltinFont, FontError, FontRegistry, css_weight, family_candidates


class CssWeightTests(unittest.TestCase):
    def test_keywords(self) -> None:
        self.assertEqual(css_weight("normal"), 400)
        self.assertEqual(css_weight("Bold"), 700)
        self.assertEqual(css_weight("lighter"), 300)

    def test_numeric(self) -> None:
        self.assertEqual(css_weight("600"), 600)
        self.assertEqual(css_weight(350), 350)

    def test_unknown_is_normal(self) -> None:
        self.assertEqual(css_weight("heavy-ish"), 400)


class FamilyCandidatesTests(unittest.TestCase):
    def test_splits_and_normalises(self) -> None:
        self.assertEqual(
            family_candidates("'Times New Roman',  Georgia , serif"),
            ["times new roman", "georgia", "serif"],
        )

    def test_empty(self) -> None:
        self.assertEqual(family_candidates(" , "), [])


class FontRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = FontRegistry()

    def test_generic_families(self) -> None:
        self.assertEqual(self.registry.font_name("sans-serif", "normal"), "Helvetica")
        self.assertEqual(self.registry.font_name("serif", "bold"), "Times-Bold")
        self.assertEqual(self.registry.font_name("monospace", "700"), "Courier-Bold")

    def test_first_known_family_wins(self) -> None:
        self.assertEqual(
            self.registry.font_name("Georgia, 'Courier New', serif", "normal"),
            "Courier",
        )

    def test_unknown_family_falls_back(self) -> None:
        with self.assertLogs("fonts", level="WARNING"):
            name = self.registry.font_name("Comic Sans MS", "bold")
        self.assertEqual(name, "Helvetica-Bold")

    def test_bold_threshold(self) -> None:
        self.assertEqual(self.registry.font_name("Arial", "500"), "Helvetica")
        self.assertEqual(self.registry.font_name("Arial", "600"), "Helvetica-Bold")

    def test_registry_without_fallback_family(self) -> None:
        registry = FontRegistry({"serif": BuiltinFont("Times-Roman", "Times-Bold")})
        with self.assertLogs("fonts", level="WARNING"):
            with self.assertRaises(FontError):
                registry.font_name("Papyrus", "normal")

    def test_get_font_name_unknown_key(self) -> None:
        with self.assertRaises(FontError):
            self.registry.get_font_name("papyrus", 400)


if __name__ == "__main__":
    unittest.main()
