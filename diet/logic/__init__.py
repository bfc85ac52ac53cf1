"""Core business logic layer.

Subpackages:
- safety: allergy safety gate
- scoring: disease nutrient rules and scoring
- variety: recently-served tracking
- planning: candidate ranking and family plan reconciliation
- reporting: nutrient rollups and day reports
"""
__all__ = ["safety", "scoring", "variety", "planning", "reporting"]
