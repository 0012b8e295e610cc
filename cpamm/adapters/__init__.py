"""Collaborators the AMM core talks to: asset transfers and event sinks."""

from cpamm.adapters.notifications import (
    FanoutSink,
    LoggingSink,
    NotificationSink,
    RecordingSink,
    deliver,
)
from cpamm.adapters.transfers import AssetTransferAdapter, InMemoryLedger, pull_all

__all__ = [
    "AssetTransferAdapter",
    "InMemoryLedger",
    "pull_all",
    "NotificationSink",
    "LoggingSink",
    "RecordingSink",
    "FanoutSink",
    "deliver",
]
