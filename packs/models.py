"""
Model registry entry point for the packs app.
"""
from packs.infrastructure.models import SubscriptionPack  # noqa: F401
