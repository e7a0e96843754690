"""Feature management building blocks: identifiers, settings model, allocation, batching and payloads."""

__version__ = "0.1.0"