"""
Quota enforcement for outgoing requests.

Provides a per-window admission gate and the scheduler that resets it.
"""

from crpt_client.quota.gate import AdmissionGate, GateStatus
from crpt_client.quota.scheduler import WindowResetScheduler
from crpt_client.quota.window import QuotaWindow, TimeUnit

__all__ = [
    "AdmissionGate",
    "GateStatus",
    "QuotaWindow",
    "TimeUnit",
    "WindowResetScheduler",
]
