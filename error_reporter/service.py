"""Ingestion pipeline: validate, rate limit, enrich, persist."""

import logging
from dataclasses import dataclass

from error_reporter.config import Config
from error_reporter.enrichment import EnrichmentClient
from error_reporter.history import HistoryReader
from error_reporter.models import HistoryEntry, LogRecord, create_log_record
from error_reporter.rate_limiter import RateLimiter
from error_reporter.store import AppendLogStore
from error_reporter.validator import ReportValidator, ValidationFailure

logger = logging.getLogger(__name__)


class InvalidReport(Exception):
    """Payload did not match the error report shape."""

    def __init__(self, failure: ValidationFailure):
        super().__init__(failure.message)
        self.failure = failure


class RateLimitExceeded(Exception):
    """Client went over its request ceiling for the current window."""

    def __init__(self, client_key: str, retry_after: float):
        super().__init__(f"rate limit exceeded for {client_key}")
        self.client_key = client_key
        self.retry_after = retry_after


@dataclass
class ServiceContext:
    """Everything a request handler needs, built once at startup."""

    config: Config
    validator: ReportValidator
    rate_limiter: RateLimiter
    enrichment: EnrichmentClient
    store: AppendLogStore
    history: HistoryReader

    def ingest(self, payload, client_key: str) -> LogRecord:
        """Run one report through the pipeline and return the persisted record.

        Raises InvalidReport, RateLimitExceeded, or store.PersistenceError.
        """
        result = self.validator.validate(payload)
        if isinstance(result, ValidationFailure):
            logger.debug("Rejected report from %s: %s", client_key, result.message)
            raise InvalidReport(result)

        admission = self.rate_limiter.admit(client_key)
        if not admission.allowed:
            logger.warning("Rate limit exceeded for %s", client_key)
            raise RateLimitExceeded(client_key, admission.retry_after)

        recommendation = self.enrichment.enrich(result)
        record = self.store.append(create_log_record(result, recommendation))
        logger.info("Recorded error from %s: %.100s", client_key, record.message)
        return record

    def read_history(self) -> list[HistoryEntry]:
        return self.history.read_all()


def build_context(config: Config, time_func=None, session=None) -> ServiceContext:
    """Wire up the pipeline components from config."""
    store = AppendLogStore(config.log_path, fsync=config.fsync_writes)
    return ServiceContext(
        config=config,
        validator=ReportValidator(),
        rate_limiter=RateLimiter(
            config.rate_limit_enabled,
            config.rate_limit_max_requests,
            config.rate_limit_window_seconds,
            time_func,
        ),
        enrichment=EnrichmentClient(
            config.enrichment_url,
            config.enrichment_api_key,
            timeout=config.enrichment_timeout_seconds,
            word_limit=config.recommendation_word_limit,
            session=session,
        ),
        store=store,
        history=HistoryReader(config.log_path, lock=store.lock),
    )
