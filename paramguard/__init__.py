"""paramguard: per-action request parameter source filtering."""

__version__ = "0.1.0"
