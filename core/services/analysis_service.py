# =============================================================================
# core/services/analysis_service.py - Outbreak Analyst
# =============================================================================
# Sends prompts to the OpenAI chat completions API and returns the text
# answer unmodified.
#
# No retries, no timeout policy beyond the SDK defaults, and no validation
# of the model's output.
#
# Usage:
#   analyst = OutbreakAnalyst(OpenAI(api_key=...), model="gpt-3.5-turbo")
#   insight = analyst.complete("Summarize: ...")
#   analysis = analyst.analyze_zip(record, metadata_text, window_days=14)
# =============================================================================

from __future__ import annotations

import logging

from openai import OpenAI, OpenAIError

from app.exceptions import PopulationMissingError, UpstreamServiceError
from core.models.symptoms import ZipRecord
from core.services.aggregator import summarize_window
from core.services.prompt_builder import SYSTEM_PROMPT, build_outbreak_prompt

logger = logging.getLogger(__name__)


class OutbreakAnalyst:
    """
    Language-model client for outbreak analysis.

    Attributes:
        client: OpenAI client
        model: Chat completion model ID
    """

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model
        logger.info(f"OutbreakAnalyst initialized with model={self.model}")

    @classmethod
    def from_settings(cls, settings) -> OutbreakAnalyst:
        return cls(OpenAI(api_key=settings.OPENAI_API_KEY), model=settings.OPENAI_MODEL)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    def complete(self, prompt: str) -> str:
        """
        Send one user message and return the stripped text answer.

        Raises:
            UpstreamServiceError: If the API call fails or returns no text
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except OpenAIError as e:
            # Provider details stay in the logs, not in the HTTP response
            logger.error(f"Error querying OpenAI: {e}")
            raise UpstreamServiceError("openai") from e

        content = response.choices[0].message.content if response.choices else None
        if content is None:
            logger.error("OpenAI returned an empty completion")
            raise UpstreamServiceError("openai")
        return content.strip()

    def analyze_zip(self, record: ZipRecord, zip_metadata: str, window_days: int) -> str:
        """
        Run an outbreak analysis for a ZIP over its trailing window.

        Raises:
            PopulationMissingError: If the record has no positive population
            UpstreamServiceError: If the API call fails
        """
        if not record.population:
            raise PopulationMissingError(record.zip)

        totals, entries_included = summarize_window(record.entries, window_days)
        logger.debug(f"ZIP {record.zip}: {entries_included} entries in {window_days}-day window")

        prompt = build_outbreak_prompt(
            zip_code=record.zip,
            population=record.population,
            totals=totals,
            zip_metadata=zip_metadata,
            entries_included=entries_included,
        )
        return self.complete(prompt)
