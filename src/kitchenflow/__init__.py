"""KitchenFlow - recipe import and ingredient normalization."""

__version__ = "0.3.0"
