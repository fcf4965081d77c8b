"""Best-effort fix recommendations from an external text-generation service.

Every call resolves to a plain recommendation string. Failures are first
classified into an EnrichmentOutcome and then mapped to a fixed fallback
message, so nothing here can fail an ingestion request.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from error_reporter.models import ErrorReport

logger = logging.getLogger(__name__)

NO_STACK_MARKER = "No stack available"


class OutcomeKind(Enum):
    SUCCESS = "success"
    CREDENTIAL_MISSING = "credential_missing"
    TRANSPORT_ERROR = "transport_error"
    SERVICE_ERROR = "service_error"
    MALFORMED_RESPONSE = "malformed_response"


FALLBACK_MESSAGES = {
    OutcomeKind.CREDENTIAL_MISSING: "Enrichment API key not set. Please configure GEMINI_API_KEY.",
    OutcomeKind.TRANSPORT_ERROR: "Error calling service.",
    OutcomeKind.SERVICE_ERROR: "Service error: unable to retrieve recommendation.",
    OutcomeKind.MALFORMED_RESPONSE: "No recommendation provided by service.",
}


@dataclass(frozen=True)
class EnrichmentOutcome:
    kind: OutcomeKind
    text: Optional[str] = None


def to_recommendation(outcome: EnrichmentOutcome) -> str:
    """Collapse an outcome into the string stored alongside the report."""
    if outcome.kind is OutcomeKind.SUCCESS and outcome.text:
        return outcome.text
    return FALLBACK_MESSAGES.get(outcome.kind, FALLBACK_MESSAGES[OutcomeKind.MALFORMED_RESPONSE])


def build_prompt(report: ErrorReport, word_limit: int = 60) -> str:
    """Render the instruction text sent to the service for one report."""
    stack = report.error_stack or NO_STACK_MARKER
    return (
        "You are an expert software engineer. Based on the following error details, "
        f"please provide a clear recommendation on how to fix the error within {word_limit} words:\n"
        f'Error Message: "{report.error_message}"\n'
        f"Location: {report.url} at line {report.line}, column {report.column}\n"
        f"Stack Trace: {stack}\n"
        "Recommendation:"
    )


def extract_text(data) -> Optional[str]:
    """Return the first candidate's first text part, or None if the shape is wrong."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        return None
    return text


class EnrichmentClient:
    """Single-attempt client for a generateContent-style endpoint."""

    def __init__(self, api_url: str, api_key: str, timeout: Optional[float] = 30.0,
                 word_limit: int = 60, session: Optional[requests.Session] = None):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout if timeout and timeout > 0 else None
        self.word_limit = word_limit
        self.session = session or requests.Session()

    def enrich(self, report: ErrorReport) -> str:
        """Return a recommendation for report. Never raises."""
        return to_recommendation(self.analyze(report))

    def analyze(self, report: ErrorReport) -> EnrichmentOutcome:
        if not self.api_key:
            logger.warning("Enrichment API key not set. Skipping external error analysis.")
            return EnrichmentOutcome(OutcomeKind.CREDENTIAL_MISSING)

        payload = {"contents": [{"parts": [{"text": build_prompt(report, self.word_limit)}]}]}

        try:
            response = self.session.post(
                self.api_url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Error calling enrichment service: %s", e)
            return EnrichmentOutcome(OutcomeKind.TRANSPORT_ERROR)

        if not response.ok:
            logger.error(
                "Enrichment service responded with %d: %s",
                response.status_code, response.text,
            )
            return EnrichmentOutcome(OutcomeKind.SERVICE_ERROR)

        try:
            data = response.json()
        except ValueError:
            logger.error("Enrichment service returned a non-JSON body")
            return EnrichmentOutcome(OutcomeKind.MALFORMED_RESPONSE)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Full enrichment response: %s", json.dumps(data, indent=2))

        text = extract_text(data)
        if text is None:
            return EnrichmentOutcome(OutcomeKind.MALFORMED_RESPONSE)
        return EnrichmentOutcome(OutcomeKind.SUCCESS, text)
