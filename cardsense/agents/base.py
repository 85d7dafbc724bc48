"""Base agent abstraction for statement analysis agents.

This module defines the abstract base class for LLM-backed agents that turn raw statement text into a structured analysis.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseAgent(ABC):
    """Abstract base class for all agents."""

    @abstractmethod
    def analyze(self, statement_text: str) -> dict[str, Any]:
        """Analyze statement text and return the structured result."""
