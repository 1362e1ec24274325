"""Candidate extraction from raw AI tax-plan text.

The AI is asked for blocks of ``Category / Suggestion / Potential Savings``
but rarely answers in exactly that shape. Extraction is an ordered list of
strategies; the first one that yields at least one candidate wins:

  1. ``structured``: three regex variants (line-separated fields, one line with
     dash separators, one line with ``|`` or ``;`` separators).
  2. ``line_parser``: a line-oriented state machine for looser layouts.

The reported total ("Total Potential Savings: RM 2,450") and a short summary
paragraph are extracted independently of which strategy matched. Nothing here
repairs numbers: a candidate without a usable positive amount is dropped.
"""
from __future__ import annotations

import logging
import math
import re
from enum import Enum
from typing import Callable, List, NamedTuple, Optional

from taxplan.utilities.constants import MAX_DESCRIPTION_LENGTH

logger = logging.getLogger(__name__)


class Candidate(NamedTuple):
    category: str
    suggestion_text: str
    potential_saving: float


class ExtractionResult(NamedTuple):
    candidates: List[Candidate]
    reported_total: Optional[float]
    strategy: Optional[str]
    summary: Optional[str]


# === Amount parsing ===
_NUMBER = r"\d[\d,]*(?:\.\d+)?"
_CURRENCY_AMOUNT_RE = re.compile(r"(?:RM|MYR)[ \t]*(" + _NUMBER + r")", re.IGNORECASE)
_LEADING_AMOUNT_RE = re.compile(r"^[^\w]*(" + _NUMBER + r")")


def parse_amount(token) -> Optional[float]:
    """Parse a money token such as ``RM 1,200.50``; None unless finite and positive."""
    if token is None:
        return None
    clean = re.sub(r"(?i)rm|myr|[$,\s]", "", str(token)).rstrip(".")
    if not clean:
        return None
    try:
        value = float(clean)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def find_currency_amount(text: str) -> Optional[float]:
    """Return the first positive ``RM <number>`` amount in text."""
    for match in _CURRENCY_AMOUNT_RE.finditer(text or ""):
        value = parse_amount(match.group(1))
        if value is not None:
            return value
    return None


# === Text cleaning ===
def clean_response_text(text: Optional[str]) -> str:
    """Normalize newlines, drop markdown code fences and emphasis markers."""
    if not text:
        return ""
    text = str(text).replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"```[\w-]*\n?(.*?)```", r"\1", text, flags=re.S)
    text = text.replace("```", "")
    text = text.replace("**", "").replace("__", "")
    return text.strip()


# === Strategy 1: structured-delimiter patterns ===
_BULLET = r"(?:[-*•][ \t]*|\d+[.)][ \t]*)?"
_SAVINGS_LABEL = r"(?:Potential|Estimated)[ \t]+Savings?[ \t]*:?[ \t]*"
_AMOUNT = r"[^\n\d]{0,25}?(?P<amount>" + _NUMBER + r")"
_FIELD_STOP = r"(?:Category|Suggestion|(?:Potential|Estimated)[ \t]+Savings?|Total)\b"
# A field value never runs into the next "Category:" on the same line
_NEXT_RECORD = r"Category[ \t]*:"


def _field(stop: str, chars: str = r"[^\n]") -> str:
    """One-line field value that ends before ``stop`` or the next record."""
    return r"(?:(?!" + stop + r"|" + _NEXT_RECORD + r")" + chars + r")+"


STRUCTURED_PATTERNS: tuple[re.Pattern, ...] = (
    # Category / Suggestion / Potential Savings on separate (optionally bulleted) lines
    re.compile(
        r"Category[ \t]*:[ \t]*(?P<category>" + _field(r"[ \t]*\n") + r")[ \t]*\n"
        r"\s*" + _BULLET + r"Suggestion[ \t]*:[ \t]*"
        r"(?P<suggestion>[^\n]+(?:\n(?![ \t]*" + _BULLET + _FIELD_STOP + r")[^\n]+)*)"
        r"\s+" + _BULLET + _SAVINGS_LABEL + _AMOUNT,
        re.IGNORECASE,
    ),
    # Category: X - Suggestion: Y - Potential Savings: RM n
    re.compile(
        r"Category[ \t]*:[ \t]*(?P<category>" + _field(r"[ \t]+-[ \t]*Suggestion") + r")[ \t]+-[ \t]*"
        r"Suggestion[ \t]*:[ \t]*(?P<suggestion>" + _field(r"[ \t]+-[ \t]*(?:Potential|Estimated)")
        + r")[ \t]+-[ \t]*" + _SAVINGS_LABEL + _AMOUNT,
        re.IGNORECASE,
    ),
    # Category: X | Suggestion: Y | Potential Savings: RM n  (also ';')
    re.compile(
        r"Category[ \t]*:[ \t]*(?P<category>" + _field(r"[ \t]*[|;]", r"[^\n|;]") + r")[ \t]*[|;][ \t]*"
        r"Suggestion[ \t]*:[ \t]*(?P<suggestion>" + _field(r"[ \t]*[|;][ \t]*(?:Potential|Estimated)", r"[^\n|]")
        + r")[ \t]*[|;][ \t]*" + _SAVINGS_LABEL + _AMOUNT,
        re.IGNORECASE,
    ),
)


def _build_candidate(category: str, suggestion: str, amount: Optional[float]) -> Optional[Candidate]:
    category = re.sub(r"\s+", " ", category or "").strip(" \t-:")
    suggestion = re.sub(r"\s+", " ", suggestion or "").strip()
    if not category or not suggestion or amount is None:
        return None
    return Candidate(category, suggestion, amount)


def extract_with_patterns(text: str) -> List[Candidate]:
    """Try each structured pattern over the whole text; first pattern with matches wins."""
    for index, pattern in enumerate(STRUCTURED_PATTERNS):
        candidates = []
        for match in pattern.finditer(text):
            candidate = _build_candidate(
                match.group("category"), match.group("suggestion"), parse_amount(match.group("amount"))
            )
            if candidate:
                candidates.append(candidate)
        if candidates:
            logger.debug("Structured pattern %d matched %d suggestions", index + 1, len(candidates))
            return candidates
    return []


# === Strategy 2: line-oriented state machine ===
class ParseState(Enum):
    IDLE = "idle"
    HAVE_CATEGORY = "have_category"
    HAVE_SUGGESTION = "have_suggestion"
    # HAVE_SUGGESTION whose text already carries an RM amount
    COMPLETE = "complete"


_LINE_PREFIX_RE = re.compile(r"^(?:[-*•#>]+|\d+[.)])\s*")
_CATEGORY_LINE_RE = re.compile(r"^category\b[ \t]*[:\-]?[ \t]*(?P<value>.*)$", re.IGNORECASE)
_SUGGESTION_LINE_RE = re.compile(r"^suggestion\b[ \t]*[:\-]?[ \t]*(?P<value>.*)$", re.IGNORECASE)
_SAVINGS_LINE_RE = re.compile(
    r"^(?:(?:potential|estimated)[ \t]+)?savings?[ \t]*(?:[:\-]|(?=(?:RM|MYR)\b))[ \t]*(?P<value>.*)$", re.IGNORECASE
)
_TOTAL_LINE_RE = re.compile(r"^total\b", re.IGNORECASE)


def _strip_line_prefix(line: str) -> str:
    previous = None
    while previous != line:
        previous = line
        line = _LINE_PREFIX_RE.sub("", line).strip()
    return line


def _savings_line_amount(value: str) -> Optional[float]:
    amount = find_currency_amount(value)
    if amount is not None:
        return amount
    match = _LEADING_AMOUNT_RE.match(value)
    return parse_amount(match.group(1)) if match else None


class LineParser:
    """Incremental Category/Suggestion/Savings record builder."""

    def __init__(self):
        self.state = ParseState.IDLE
        self.category = ""
        self.suggestion = ""
        self.candidates: List[Candidate] = []

    def _reset(self):
        self.state = ParseState.IDLE
        self.category = ""
        self.suggestion = ""

    def _set_suggestion(self, text: str):
        self.suggestion = text
        has_amount = find_currency_amount(text) is not None
        self.state = ParseState.COMPLETE if has_amount else ParseState.HAVE_SUGGESTION

    def _emit(self, amount: Optional[float]) -> bool:
        candidate = _build_candidate(self.category, self.suggestion, amount)
        if candidate is None:
            return False
        self.candidates.append(candidate)
        self._reset()
        return True

    def flush(self):
        """Emit the pending record if its suggestion text carries an amount."""
        if self.state is ParseState.COMPLETE:
            self._emit(find_currency_amount(self.suggestion))

    def feed(self, raw_line: str):
        line = _strip_line_prefix(raw_line.strip())
        if not line:
            return

        match = _CATEGORY_LINE_RE.match(line)
        if match:
            self.flush()
            self._reset()
            self.category = match.group("value").strip()
            if self.category:
                self.state = ParseState.HAVE_CATEGORY
            return

        match = _SUGGESTION_LINE_RE.match(line)
        if match:
            if self.state is not ParseState.IDLE:
                self._set_suggestion(match.group("value").strip())
            return

        match = _SAVINGS_LINE_RE.match(line)
        if match:
            if self.state in (ParseState.HAVE_SUGGESTION, ParseState.COMPLETE):
                self._emit(_savings_line_amount(match.group("value")))
            return

        if _TOTAL_LINE_RE.match(line):
            return

        if self.state in (ParseState.HAVE_SUGGESTION, ParseState.COMPLETE):
            self._set_suggestion(f"{self.suggestion} {line}".strip())

    def finish(self) -> List[Candidate]:
        self.flush()
        return self.candidates


def extract_with_line_parser(text: str) -> List[Candidate]:
    parser = LineParser()
    for line in text.split("\n"):
        parser.feed(line)
    return parser.finish()


EXTRACTION_STRATEGIES: tuple[tuple[str, Callable[[str], List[Candidate]]], ...] = (
    ("structured", extract_with_patterns),
    ("line_parser", extract_with_line_parser),
)


# === Total and summary ===
TOTAL_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"Total[ \t\w]{0,40}?Savings?[ \t]*:?[ \t]*(?:of[ \t]*)?(?:approximately[ \t]*)?RM[ \t]*(" + _NUMBER + r")",
               re.IGNORECASE),
    re.compile(r"Total[ \t]*:?[ \t]*RM[ \t]*(" + _NUMBER + r")", re.IGNORECASE),
    re.compile(r"total of[ \t]*RM[ \t]*(" + _NUMBER + r")", re.IGNORECASE),
    re.compile(r"save up to[ \t]*RM[ \t]*(" + _NUMBER + r")", re.IGNORECASE),
)


def extract_total_savings(text: str) -> Optional[float]:
    """First total-savings figure found in the text, or None. Informational only."""
    for pattern in TOTAL_PATTERNS:
        for match in pattern.finditer(text or ""):
            value = parse_amount(match.group(1))
            if value is not None:
                return value
    return None


def extract_summary(text: str) -> Optional[str]:
    """First prose paragraph of the answer (the AI's short tax analysis)."""
    for paragraph in re.split(r"\n\s*\n", text or ""):
        lines = [_strip_line_prefix(line.strip()) for line in paragraph.split("\n")]
        lines = [line for line in lines if line]
        if not lines:
            continue
        if any(_CATEGORY_LINE_RE.match(line) or _SUGGESTION_LINE_RE.match(line) for line in lines):
            continue
        summary = " ".join(lines)
        if len(summary) > MAX_DESCRIPTION_LENGTH:
            summary = summary[:MAX_DESCRIPTION_LENGTH - 3] + "..."
        return summary
    return None


def extract_response(raw_text: Optional[str]) -> ExtractionResult:
    """Run the strategy cascade and the total/summary extractors over raw AI text."""
    text = clean_response_text(raw_text)
    if not text:
        return ExtractionResult([], None, None, None)

    candidates: List[Candidate] = []
    strategy = None
    for name, extract in EXTRACTION_STRATEGIES:
        candidates = extract(text)
        if candidates:
            strategy = name
            break

    if strategy:
        logger.info("Extracted %d suggestions using %s strategy", len(candidates), strategy)
    else:
        logger.warning("No suggestions could be extracted from AI response (%d chars)", len(text))

    return ExtractionResult(candidates, extract_total_savings(text), strategy, extract_summary(text))


__all__ = [
    "Candidate", "ExtractionResult", "ParseState", "LineParser", "EXTRACTION_STRATEGIES",
    "STRUCTURED_PATTERNS", "TOTAL_PATTERNS", "clean_response_text", "parse_amount",
    "find_currency_amount", "extract_with_patterns", "extract_with_line_parser",
    "extract_total_savings", "extract_summary", "extract_response",
]
