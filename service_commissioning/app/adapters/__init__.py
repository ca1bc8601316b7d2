"""
Adapters package for the commissioning client.

Contains the HTTP client that talks to the external registry. Adapters
encapsulate the endpoint and request shapes and map transport failures to
shared errors.
"""

from .registry_client import SubmissionClient

__all__ = ["SubmissionClient"]
