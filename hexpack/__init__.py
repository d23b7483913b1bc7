"""hexpack: "create package" built as ports and adapters."""

__version__ = "0.1.0"
