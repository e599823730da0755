"""auth-explorer: step through identity provider authentication exchanges."""

__version__ = "0.3.0"
