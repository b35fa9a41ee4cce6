"""
Subscriptions module - Customer subscription ledger.

This module handles:
- Subscription entity and its state machine
- Access policy (validity, one ACTIVE subscription per customer)
- Lifecycle (request, approve, assign, unassign, deactivate)
- Expiry sweep of overdue ACTIVE subscriptions
"""
