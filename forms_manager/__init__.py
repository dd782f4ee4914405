"""forms-manager: forms authoring backend."""

__version__ = "0.1.0"
