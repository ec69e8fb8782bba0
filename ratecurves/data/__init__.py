"""Data providers for lending market reserve curves."""

from ratecurves.data.provider_factory import create_provider

__all__ = ["create_provider"]
