"""
Infrastructure layer - Adapters for the task engine.

This layer contains:
- Observability (structlog configuration, correlation, error reporting)
- In-memory stub adapters for every application port

IMPORT RULES:
- CAN import from: domain, application, config
- CANNOT import from: bootstrap
"""
