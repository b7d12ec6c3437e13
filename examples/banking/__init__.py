"""Banking example for guided-workflows."""
