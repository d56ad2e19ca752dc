"""Go Cricket: a four-player Go Fish rules engine with CPU opponents."""

__version__ = "0.1.0"
