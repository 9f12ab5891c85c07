"""CPU ray tracer that renders sphere scenes with a pool of worker threads."""

__version__ = "0.1.0"
