"""
Commissioning client package.

Submits goods commissioning documents to the external registry while
staying inside the registry's request quota:
- Admission: every submission passes through the rate gate
- Encoding: documents and signatures travel as base64 inside a JSON envelope
- Classification: replies map to a created id or a typed error

Structure:
- app.ratelimit: Admission gate with capped drip refill.
- app.domain: Wire models and codec.
- app.adapters: HTTP client for the registry.
- app.cli: Command-line entry point.
"""
