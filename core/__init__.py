"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions, value objects and the clock
- Event bus and event handlers
- Middleware components
- Celery tasks and management commands
"""
