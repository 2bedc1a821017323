"""
AI Monitor - Unified logging and usage tracking.

One call tracks everything for a provider call:
- Structured JSON logs
- In-memory counters (calls, failures, tokens, latency)

Usage:
    from app.ai.monitoring import ai_monitor

    ai_monitor.track_request(
        request_id="abc123",
        prompt="Explain the OSI model",
        providers=["openai", "gemini"],
        max_tokens=800,
    )

    ai_monitor.track_result(
        request_id="abc123",
        provider="openai",
        model="gpt-4o-mini",
        latency_ms=812.4,
        success=True,
        tokens_used=312,
    )

    stats = ai_monitor.get_stats()
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional


# ---------------------------------------------------------------------------
# LOGGING SETUP
# ---------------------------------------------------------------------------
LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger("fanout.ai")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the "fanout" logger tree.

    Safe to call more than once; the handler is only added the first time.
    """
    root = logging.getLogger("fanout")
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)

    return root


# ---------------------------------------------------------------------------
# METRICS DATA CLASSES
# ---------------------------------------------------------------------------
@dataclass
class AggregatedMetrics:
    """Counters over every provider call since startup (or the last reset)."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_tokens: int = 0
    total_latency_ms: float = 0.0
    requests_by_provider: Dict[str, int] = field(default_factory=dict)
    failures_by_provider: Dict[str, int] = field(default_factory=dict)
    tokens_by_provider: Dict[str, int] = field(default_factory=dict)

    @property
    def avg_latency_ms(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_latency_ms / self.total_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    def to_dict(self) -> Dict:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "success_rate": f"{self.success_rate:.1f}%",
            "total_tokens": self.total_tokens,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "requests_by_provider": dict(self.requests_by_provider),
            "failures_by_provider": dict(self.failures_by_provider),
            "tokens_by_provider": dict(self.tokens_by_provider),
        }


# ---------------------------------------------------------------------------
# UNIFIED AI MONITOR
# ---------------------------------------------------------------------------
class AIMonitor:
    """
    Unified AI monitoring: logging + counters in one call.

    Each track_* method:
    1. Writes a structured JSON log line
    2. Updates in-memory counters (track_result only)
    """

    def __init__(self):
        self._logger = logger
        self._lock = Lock()
        self._aggregated = AggregatedMetrics()

    def track_request(
        self,
        request_id: str,
        prompt: str,
        providers: List[str],
        max_tokens: int,
    ) -> None:
        """Log the start of a fan-out: one prompt going to several providers."""
        log_data = {
            "event": "ai_request",
            "request_id": request_id,
            "providers": list(providers),
            "max_tokens": max_tokens,
            "prompt_length": len(prompt),
            "prompt_preview": prompt[:100] + "..." if len(prompt) > 100 else prompt,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._logger.info(f"AI Request: {json.dumps(log_data)}")

    def track_result(
        self,
        request_id: str,
        provider: str,
        model: str,
        latency_ms: float,
        success: bool,
        tokens_used: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Log one provider's outcome and update counters.

        Failures are logged at WARNING level.
        """
        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "provider": provider,
            "model": model,
            "success": success,
            "latency_ms": round(latency_ms, 2),
            "tokens": tokens_used,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if error:
            log_data["error"] = error

        level = logging.INFO if success else logging.WARNING
        self._logger.log(level, f"AI Response: {json.dumps(log_data)}")

        tokens = tokens_used or 0
        with self._lock:
            agg = self._aggregated
            agg.total_requests += 1
            if success:
                agg.successful_requests += 1
            else:
                agg.failed_requests += 1
                agg.failures_by_provider[provider] = agg.failures_by_provider.get(provider, 0) + 1
            agg.total_tokens += tokens
            agg.total_latency_ms += latency_ms
            agg.requests_by_provider[provider] = agg.requests_by_provider.get(provider, 0) + 1
            agg.tokens_by_provider[provider] = agg.tokens_by_provider.get(provider, 0) + tokens

    def get_stats(self) -> AggregatedMetrics:
        """Return a snapshot of the counters."""
        with self._lock:
            agg = self._aggregated
            return AggregatedMetrics(
                total_requests=agg.total_requests,
                successful_requests=agg.successful_requests,
                failed_requests=agg.failed_requests,
                total_tokens=agg.total_tokens,
                total_latency_ms=agg.total_latency_ms,
                requests_by_provider=dict(agg.requests_by_provider),
                failures_by_provider=dict(agg.failures_by_provider),
                tokens_by_provider=dict(agg.tokens_by_provider),
            )

    def reset(self) -> None:
        with self._lock:
            self._aggregated = AggregatedMetrics()


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_monitor = AIMonitor()
