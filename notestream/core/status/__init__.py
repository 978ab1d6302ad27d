"""Transient status reporting."""

from notestream.core.status.status_reporter import StatusReporter

__all__ = ["StatusReporter"]
