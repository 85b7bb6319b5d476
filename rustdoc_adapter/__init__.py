"""Graph-style query adapter over rustdoc JSON crate data, with attribute parsing."""

__version__ = "0.1.0"