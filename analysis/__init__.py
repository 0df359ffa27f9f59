"""Model-reply parsing and recommendation rules for crypto analyses."""

import analysis.recommendation as recommendation
import analysis.structured_response as structured_response

__all__ = [
    "recommendation",
    "structured_response",
]
