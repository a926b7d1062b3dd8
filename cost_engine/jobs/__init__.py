"""
Background Jobs
================
Scheduled pricing table refresh.
"""

from cost_engine.jobs.refresher import PricingRefresher

__all__ = ["PricingRefresher"]
