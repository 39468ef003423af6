"""
Application layer - Ports and orchestration for the task engine.

This layer contains:
- Port definitions (Protocol interfaces for infrastructure)
- Application services that load, transition, save and notify

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure adapters, bootstrap
  (observability helpers are the one infrastructure import allowed)
"""
