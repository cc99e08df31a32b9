"""
LLM Module
==========

Pluggable reasoning capabilities for query validation and translation.
"""

from query_wise.llm.base import ReasoningCapability
from query_wise.llm.mock import MockReasoner

__all__ = [
    "ReasoningCapability",
    "MockReasoner",
]
