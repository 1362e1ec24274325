"""Core business logic layer.

Subpackages:
- tables: marginal rate schedule and relief base amounts
- extraction: turning raw AI text into candidate suggestions
- validation: bound checks, repair and breadth top-up
- fallback: deterministic rule-based suggestions
- assembly: building the final Plan
- prompting: building the AI prompt
- reporting: plan progress and PDF export

The pipeline module ties extraction, validation and assembly together.
"""
__all__ = ["tables", "extraction", "validation", "fallback", "assembly", "prompting", "reporting", "pipeline"]
