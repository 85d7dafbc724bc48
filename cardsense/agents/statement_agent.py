"""StatementAnalysisAgent: LLM-based analysis of bank statement text.

The agent sends the leading part of a statement's text to the chat-completions
API, trying the primary model first and the fallback model second, and parses
the first JSON object out of the first non-empty reply.
"""

import json
import re
from typing import Any

from cardsense.agents.base import BaseAgent
from cardsense.agents.prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from cardsense.core.errors import AnalysisError
from cardsense.core.settings import Settings
from cardsense.core.utils import get_logger

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

logger = get_logger("cardsense.agent")


class StatementAnalysisAgent(BaseAgent):
    """Agent responsible for LLM-based analysis of statement text."""

    def __init__(self, llm_client: object, settings: Settings) -> None:
        """Initialize the agent with an LLM client and settings."""
        self.llm_client = llm_client
        self.settings = settings

    @property
    def models(self) -> list[str]:
        """Models to try, in order."""
        return [self.settings.analysis_model, self.settings.analysis_fallback_model]

    def build_prompt(self, statement_text: str) -> str:
        """Fill the user prompt with the statement text, cut to the configured length."""
        return USER_PROMPT_TEMPLATE.format(statement_text=statement_text[: self.settings.analysis_max_chars])

    def analyze(self, statement_text: str) -> dict[str, Any]:
        """Return the structured analysis of a statement."""
        raw_output = self._complete(self.build_prompt(statement_text))
        return self._extract_json(raw_output)

    def _complete(self, prompt: str) -> str:
        """Ask each model in turn until one returns a non-empty reply."""
        last_error: str | None = None
        for model in self.models:
            try:
                logger.info(f"AGENT: Calling {model}...")
                completion = self.llm_client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.settings.analysis_temperature,
                    response_format={"type": "json_object"},
                )
            except Exception as exc:
                last_error = str(exc)
                logger.warning(f"AGENT: {model} failed: {exc}")
                continue
            text = completion.choices[0].message.content or ""
            if text.strip():
                return text
            logger.warning(f"AGENT: {model} returned an empty reply")
        msg = last_error or "No valid AI response for statement analysis"
        raise AnalysisError(msg)

    def _extract_json(self, raw_output: str) -> dict[str, Any]:
        """Parse the outermost JSON object in the model output."""
        match = JSON_OBJECT.search(raw_output)
        if not match:
            logger.error(f"AGENT: No JSON found in response: {raw_output[:300]}")
            msg = "Failed to analyze statement"
            raise AnalysisError(msg)
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            logger.exception("AGENT: Failed to parse JSON")
            msg = "Failed to analyze statement"
            raise AnalysisError(msg) from exc
        return data
