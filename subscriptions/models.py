"""
Model registry entry point for the subscriptions app.
"""
from subscriptions.infrastructure.models import Subscription  # noqa: F401
