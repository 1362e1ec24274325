import unittest
from taxplan.domain.Plan import Plan
from taxplan.domain.Suggestion import Suggestion
from taxplan.infra.pdf_utils import generate_pdf_for_plan
from taxplan.logic.reporting.plan_summary import compute_plan_summary, format_currency


def _plan():
    return Plan(
        name="Tax Plan (Oct 2026)",
        description="Reliefs & deductions <for> 2026",
        suggestions=[
            Suggestion("Lifestyle Relief", "Keep receipts.", 325.0, is_implemented=True),
            Suggestion("Medical Relief", "Book a check-up.", 650.0),
            Suggestion("Medical Relief", "Claim dental care.", 100.0, is_implemented=True),
            Suggestion("SSPN Savings", "Open an SSPN account.", 390.0),
            Suggestion("Donation", "Give to approved bodies.", 130.0),
        ],
    )


class TestPlanSummary(unittest.TestCase):

    def test_format_currency(self):
        self.assertEqual(format_currency(2450.5), "RM 2,450.50")
        self.assertEqual(format_currency(None), "RM 0.00")

    def test_summary(self):
        summary = compute_plan_summary(_plan())
        self.assertEqual(summary['suggestion_count'], 5)
        self.assertEqual(summary['implemented_count'], 2)
        self.assertAlmostEqual(summary['potential_savings'], 1595.0)
        self.assertAlmostEqual(summary['implemented_savings'], 425.0)
        self.assertAlmostEqual(summary['remaining_savings'], 1170.0)
        self.assertAlmostEqual(summary['progress'], 0.4)
        self.assertEqual(summary['categories']['Medical Relief'],
                         {'count': 2, 'implemented': 1, 'savings': 750.0})

    def test_empty_plan(self):
        summary = compute_plan_summary(Plan(name="Empty"))
        self.assertEqual(summary['suggestion_count'], 0)
        self.assertEqual(summary['progress'], 0.0)


class TestPlanPdf(unittest.TestCase):

    def test_pdf_bytes(self):
        pdf = generate_pdf_for_plan(_plan())
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 1000)


if __name__ == '__main__':
    unittest.main()
