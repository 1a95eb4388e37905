"""Music library core: plugin pooling, shared types, track tags, background tasks and widget layout."""

__version__ = "0.1.0"