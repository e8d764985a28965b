"""KitchenFlow web API."""
