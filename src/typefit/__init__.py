"""TypeFit - structural type suggestions for untyped TypeScript object literals."""

__version__ = "0.1.0"
