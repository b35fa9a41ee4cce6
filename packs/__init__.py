"""
Packs module - Subscription pack catalog.

This module handles:
- SubscriptionPack entity and domain logic
- Pack repository (port)
- Pack infrastructure (Django ORM adapters)
- Catalog commands and queries (create, update, remove, list)
"""
