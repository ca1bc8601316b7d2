"""
Domain package for the commissioning client.

- models: pydantic wire models and enumerations of the registry contract
- codec: JSON and base64 transforms applied before a document goes out
"""
