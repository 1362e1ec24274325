import math
import unittest
from taxplan.logic.fallback.synthesizer import fallback_categories, suggestion_text_for, synthesize_fallback


class TestFallbackSynthesizer(unittest.TestCase):

    def test_employee_standard_plan(self):
        suggestions = synthesize_fallback(60000, "employee", "standard")
        self.assertEqual([s.category for s in suggestions], [
            "Lifestyle Relief", "Medical Relief", "EPF Contribution", "Insurance Premium",
            "SSPN Savings", "SOCSO Contribution", "Donation",
        ])
        # (2500 + 5000 + 4000 + 3000 + 3000 + 350 + 1000) x 13%
        total = math.fsum(s.potential_saving for s in suggestions)
        self.assertAlmostEqual(total, 18850 * 0.13, places=6)

    def test_self_employed_business_plan(self):
        categories = fallback_categories("self-employed", "business")
        self.assertEqual(categories, [
            "Lifestyle Relief", "Medical Relief", "EPF Contribution", "Insurance Premium",
            "Business Expenses", "Home Office", "Capital Investment", "Business Structure",
        ])
        suggestions = synthesize_fallback(60000, "self-employed", "business")
        business = next(s for s in suggestions if s.category == "Business Expenses")
        self.assertAlmostEqual(business.potential_saving, 60000 * 0.15 * 0.13)

    def test_future_and_unknown_plan_types(self):
        self.assertEqual(fallback_categories("employee", "future")[-2:],
                         ["Long-term Investment", "Retirement Planning (PRS)"])
        self.assertEqual(fallback_categories("employee", "something-else")[-1], "Donation")

    def test_deterministic(self):
        first = synthesize_fallback(85000, "self-employed", "future", variant=3)
        second = synthesize_fallback(85000, "self-employed", "future", variant=3)
        self.assertEqual([(s.category, s.suggestion_text, s.potential_saving) for s in first],
                         [(s.category, s.suggestion_text, s.potential_saving) for s in second])

    def test_variant_changes_phrasing(self):
        self.assertNotEqual(suggestion_text_for("Lifestyle Relief", 60000, "employee", 0),
                            suggestion_text_for("Lifestyle Relief", 60000, "employee", 1))
        self.assertEqual(suggestion_text_for("Lifestyle Relief", 60000, "employee", 0),
                         suggestion_text_for("Lifestyle Relief", 60000, "employee", 3))

    def test_templates_fill_amounts(self):
        text = suggestion_text_for("EPF Contribution", 60000, "employee", 0)
        self.assertIn("RM6,600", text)
        self.assertNotIn("{", suggestion_text_for("Business Expenses", 60000, "self-employed", 0))

    def test_bounds_for_any_income(self):
        for income in (0, 1, 100, 4999, 60000, 2_000_000):
            for employment in ("employee", "self-employed"):
                for plan_type in ("standard", "future", "business"):
                    suggestions = synthesize_fallback(income, employment, plan_type)
                    self.assertGreaterEqual(len(suggestions), 5)
                    effective = income if income > 0 else 50000
                    for s in suggestions:
                        self.assertTrue(s.category and s.suggestion_text)
                        self.assertGreater(s.potential_saving, 0)
                        self.assertLessEqual(s.potential_saving, effective * 0.3 + 1e-6)


if __name__ == '__main__':
    unittest.main()
