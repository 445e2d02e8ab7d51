"""Domain models and the pure risk scoring engine."""
