"""Engine core: data-source interfaces, result collection and aggregation."""
