"""
Shared utilities for the commissioning registry client.

This package aggregates common building blocks:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace and submission correlation
- metrics: Prometheus metrics for submissions and admission
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
