"""Deferred delivery — scheduler selection and delay configuration."""

import os

DEFAULT_DELAY_SECONDS = 60.0

_scheduler_instance = None


def delivery_delay() -> float:
    """Seconds between dispatch and auto-delivery (``DELIVERY_DELAY_SECONDS``)."""
    return float(os.environ.get("DELIVERY_DELAY_SECONDS", DEFAULT_DELAY_SECONDS))


def get_scheduler():
    """Return the configured delivery scheduler (singleton).

    Uses TimerDeliveryScheduler by default; DELIVERY_SCHEDULER=manual
    leaves firing to tests or the sweep.
    """
    global _scheduler_instance
    if _scheduler_instance is None:
        adapter = os.environ.get("DELIVERY_SCHEDULER", "timer")
        if adapter == "timer":
            from storefront.delivery.timer_scheduler import TimerDeliveryScheduler

            _scheduler_instance = TimerDeliveryScheduler()
        elif adapter == "manual":
            from storefront.delivery.manual_scheduler import ManualDeliveryScheduler

            _scheduler_instance = ManualDeliveryScheduler()
        else:
            raise ValueError(f"Unknown delivery scheduler: {adapter}")
    return _scheduler_instance


def set_scheduler(scheduler):
    global _scheduler_instance
    if _scheduler_instance is not None and _scheduler_instance is not scheduler:
        _scheduler_instance.shutdown()
    _scheduler_instance = scheduler


def reset_scheduler():
    """Cancel pending timers and drop the singleton (useful for testing)."""
    global _scheduler_instance
    if _scheduler_instance is not None:
        _scheduler_instance.shutdown()
    _scheduler_instance = None
