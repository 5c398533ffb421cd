"""switchboard: a local AI assistant that dispatches requests to agents."""

__version__ = "0.1.0"
