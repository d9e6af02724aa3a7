"""hostlens: agent tools for introspecting a host runtime and reading its manuals."""

__version__ = "0.1.0"

__all__ = ["__version__"]
