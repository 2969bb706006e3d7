"""Banking services built on the data models."""
