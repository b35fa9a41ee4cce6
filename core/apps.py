"""
App configuration for the shared kernel.
"""

from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Register event handlers and, when enabled, OpenTelemetry."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if settings.OTEL_ENABLED:
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
