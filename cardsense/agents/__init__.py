"""Agents package: base class and the LLM statement analysis agent."""

from .base import BaseAgent  # noqa: F401
from .statement_agent import StatementAnalysisAgent  # noqa: F401
