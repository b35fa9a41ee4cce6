"""
Customers module - persistence adapter for the externally managed customer.

Subscriptions reference customers by id only; this module answers
existence and count questions and provides the row used to serialize
a customer's subscription changes.
"""
