"""TerraData turn-based farm simulation core."""

__version__ = "0.1.0"
