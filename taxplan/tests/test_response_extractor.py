import math
import time
import unittest
from taxplan.logic.extraction.response_extractor import (
    Candidate,
    LineParser,
    ParseState,
    clean_response_text,
    extract_response,
    extract_summary,
    extract_total_savings,
    parse_amount,
)

STANDARD_RESPONSE = """**Tax analysis:** Based on your income of RM 60,000 you fall in the 13% bracket.

- Category: Lifestyle Relief
  Suggestion: Keep receipts for books and gadgets.
  Potential Savings: RM 325

- Category: EPF Contribution
  Suggestion: Contribute the full 11% to EPF,
  and top up voluntarily if needed.
  Potential Savings: RM 520

Total Potential Savings: RM 845
"""


class TestAmountParsing(unittest.TestCase):

    def test_parse_amount(self):
        self.assertEqual(parse_amount("RM 1,200.50"), 1200.5)
        self.assertEqual(parse_amount("MYR300"), 300.0)
        self.assertEqual(parse_amount("$ 45"), 45.0)
        self.assertIsNone(parse_amount("0"))
        self.assertIsNone(parse_amount("-5"))
        self.assertIsNone(parse_amount("abc"))
        self.assertIsNone(parse_amount("inf"))
        self.assertIsNone(parse_amount("RM"))
        self.assertIsNone(parse_amount(None))

    def test_clean_response_text(self):
        text = "```markdown\n**Category:** Donation\n```"
        self.assertEqual(clean_response_text(text), "Category: Donation")
        self.assertEqual(clean_response_text(None), "")


class TestStructuredPatterns(unittest.TestCase):

    def test_line_separated_blocks(self):
        result = extract_response(STANDARD_RESPONSE)
        self.assertEqual(result.strategy, "structured")
        self.assertEqual(result.candidates, [
            Candidate("Lifestyle Relief", "Keep receipts for books and gadgets.", 325.0),
            Candidate("EPF Contribution",
                      "Contribute the full 11% to EPF, and top up voluntarily if needed.", 520.0),
        ])
        self.assertEqual(result.reported_total, 845.0)
        self.assertTrue(result.summary.startswith("Tax analysis: Based on your income"))

    def test_dash_separated_single_line(self):
        text = "Category: Donation - Suggestion: Give to approved charities - Potential Savings: RM 130"
        result = extract_response(text)
        self.assertEqual(result.strategy, "structured")
        self.assertEqual(result.candidates, [Candidate("Donation", "Give to approved charities", 130.0)])

    def test_pipe_separated_single_line(self):
        text = ("Category: Medical Relief | Suggestion: Book a health screening | Potential Savings: RM 650\n"
                "Category: SSPN Savings; Suggestion: Open an SSPN account; Estimated Savings: RM 390")
        result = extract_response(text)
        self.assertEqual(result.strategy, "structured")
        self.assertEqual([c.category for c in result.candidates], ["Medical Relief", "SSPN Savings"])
        self.assertEqual([c.potential_saving for c in result.candidates], [650.0, 390.0])

    def test_non_positive_amount_is_dropped(self):
        text = ("Category: Donation\nSuggestion: Give more.\nPotential Savings: RM 0\n\n"
                "Category: Medical Relief\nSuggestion: Get a check-up.\nPotential Savings: RM 650\n")
        result = extract_response(text)
        self.assertEqual([c.category for c in result.candidates], ["Medical Relief"])


class TestLineParser(unittest.TestCase):

    def test_loose_layout(self):
        text = ("1. Category - SSPN Savings\n"
                "Suggestion - Open an SSPN account for your child\n"
                "with monthly deposits.\n"
                "Savings - RM 390\n")
        result = extract_response(text)
        self.assertEqual(result.strategy, "line_parser")
        self.assertEqual(result.candidates, [
            Candidate("SSPN Savings", "Open an SSPN account for your child with monthly deposits.", 390.0)
        ])

    def test_complete_records_flush_on_next_category(self):
        text = ("Category: Medical Relief\n"
                "Suggestion: Claim up to RM 650 back by booking a full medical check-up.\n"
                "Category: Donation\n"
                "Suggestion: Donate to approved bodies and save RM 130.\n")
        result = extract_response(text)
        self.assertEqual(result.strategy, "line_parser")
        self.assertEqual([(c.category, c.potential_saving) for c in result.candidates],
                         [("Medical Relief", 650.0), ("Donation", 130.0)])

    def test_states(self):
        parser = LineParser()
        self.assertIs(parser.state, ParseState.IDLE)
        parser.feed("Category: Donation")
        self.assertIs(parser.state, ParseState.HAVE_CATEGORY)
        parser.feed("Suggestion: Give to charity")
        self.assertIs(parser.state, ParseState.HAVE_SUGGESTION)
        parser.feed("worth about RM 130 back")
        self.assertIs(parser.state, ParseState.COMPLETE)
        parser.feed("Potential Savings: RM 120")
        self.assertIs(parser.state, ParseState.IDLE)
        self.assertEqual(parser.finish(), [Candidate("Donation", "Give to charity worth about RM 130 back", 120.0)])

    def test_suggestion_without_category_is_ignored(self):
        parser = LineParser()
        parser.feed("Suggestion: orphan advice")
        parser.feed("Potential Savings: RM 100")
        self.assertEqual(parser.finish(), [])

    def test_prose_line_starting_with_savings_is_suggestion_text(self):
        text = ("Category: SSPN Savings\n"
                "Suggestion: Open an SSPN account for your child.\n"
                "Savings account deposits of RM 3,000 qualify\n"
                "Savings: RM 240\n")
        result = extract_response(text)
        self.assertEqual(result.strategy, "line_parser")
        self.assertEqual(len(result.candidates), 1)
        self.assertEqual(result.candidates[0].potential_saving, 240.0)
        self.assertIn("Savings account deposits", result.candidates[0].suggestion_text)


class TestTotalAndSummary(unittest.TestCase):

    def test_total_patterns(self):
        self.assertEqual(extract_total_savings("Total Potential Savings: RM 2,450"), 2450.0)
        self.assertEqual(extract_total_savings("Total: RM 500"), 500.0)
        self.assertEqual(extract_total_savings("That is a total of RM 700 in savings"), 700.0)
        self.assertEqual(extract_total_savings("You could save up to RM 1,000 this year"), 1000.0)
        self.assertIsNone(extract_total_savings("no totals here"))

    def test_summary_is_truncated(self):
        summary = extract_summary("word " * 100)
        self.assertEqual(len(summary), 200)
        self.assertTrue(summary.endswith("..."))

    def test_summary_skips_suggestion_blocks(self):
        text = "Category: Donation\nSuggestion: Give.\nPotential Savings: RM 10\n\nPlan well."
        self.assertEqual(extract_summary(text), "Plan well.")


class TestTotality(unittest.TestCase):

    def test_empty_and_garbage(self):
        for raw in (None, "", "   ", "asdf qwerty 123", "Category:\nSuggestion:\nPotential Savings: RM abc",
                    "Potential Savings: RM 5", "\x00\x01" * 50):
            result = extract_response(raw)
            self.assertEqual(result.candidates, [])
            self.assertIsNone(result.strategy)
            for c in result.candidates:
                self.assertTrue(math.isfinite(c.potential_saving))

    def test_long_single_line_without_savings_is_fast(self):
        lines = [
            "Category: x - Suggestion: y - " * 700,
            "Category: x | Suggestion: y ; " * 700,
            "Category: x " * 1700,
            "Category: " + "x" * 20000,
            "Total Total " * 1700,
        ]
        for text in lines:
            start = time.perf_counter()
            result = extract_response(text)
            self.assertLess(time.perf_counter() - start, 2.0)
            for c in result.candidates:
                self.assertGreater(c.potential_saving, 0)


if __name__ == '__main__':
    unittest.main()
