"""
Monitoring Module - Logging and usage tracking for provider calls.

Usage:
======
    from app.ai.monitoring import ai_monitor

    ai_monitor.track_request(request_id, prompt, providers, max_tokens)
    ai_monitor.track_result(request_id, provider, model, latency_ms, success)

    stats = ai_monitor.get_stats()
"""

from app.ai.monitoring.monitor import AIMonitor, AggregatedMetrics, ai_monitor, configure_logging

__all__ = [
    "AIMonitor",
    "AggregatedMetrics",
    "ai_monitor",
    "configure_logging",
]
