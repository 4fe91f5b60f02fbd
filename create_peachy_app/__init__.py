"""create-peachy-app -- bootstrap a Peachy app from the official template."""

__version__ = "1.0.0"
