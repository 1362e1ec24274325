import unittest
from taxplan.logic.prompting.tax_plan_prompt import (
    SPECIALIZED_FOCUS,
    VARIATION_FOCUS,
    ExistingPlanData,
    build_tax_plan_prompt,
    common_categories,
    get_specialized_focus,
    get_variation_focus,
)


def _existing(plan_type, *categories):
    return ExistingPlanData(plan_type=plan_type, categories=list(categories), suggestion_texts=[])


class TestTaxPlanPrompt(unittest.TestCase):

    def test_first_plan_has_no_uniqueness_section(self):
        prompt = build_tax_plan_prompt(60000, "employee", "standard")
        self.assertIn("User's Annual Income: RM 60,000.00", prompt)
        self.assertIn("Employment Type: employee", prompt)
        self.assertNotIn("UNIQUENESS REQUIREMENT", prompt)
        self.assertIn(SPECIALIZED_FOCUS["standard"][0], prompt)
        self.assertIn("Potential Savings: RM [realistic amount]", prompt)

    def test_existing_plans_add_uniqueness_section(self):
        existing = [
            _existing("standard", "Lifestyle Relief", "Medical Relief"),
            _existing("future", "Lifestyle Relief", "Long-term Investment"),
        ]
        prompt = build_tax_plan_prompt(60000, "employee", "standard", name="Aina", existing_plans=existing)
        self.assertIn("for Aina", prompt)
        self.assertIn("The user already has 2 tax plans.", prompt)
        self.assertIn("They already have 1 plans of this type.", prompt)
        self.assertIn("Common categories in existing plans: Lifestyle Relief", prompt)
        self.assertIn(get_variation_focus("standard", 2), prompt)
        self.assertIn(SPECIALIZED_FOCUS["standard"][2], prompt)

    def test_focus_rotation(self):
        self.assertEqual(get_specialized_focus("business", 6), SPECIALIZED_FOCUS["business"][1])
        self.assertEqual(get_specialized_focus("unknown", 0), SPECIALIZED_FOCUS["standard"][0])
        self.assertEqual(get_variation_focus("future", 0), VARIATION_FOCUS[1])
        self.assertEqual(get_variation_focus("standard", 9), VARIATION_FOCUS[0])

    def test_common_categories(self):
        existing = [_existing("standard", "A", "B"), _existing("standard", "A"), _existing("future", "C")]
        self.assertEqual(common_categories(existing), ["A"])

    def test_plan_type_guidelines(self):
        self.assertIn("business tax optimization", build_tax_plan_prompt(80000, "self-employed", "business"))
        self.assertIn("focus on business deductions", build_tax_plan_prompt(80000, "self-employed", "business"))


if __name__ == '__main__':
    unittest.main()
