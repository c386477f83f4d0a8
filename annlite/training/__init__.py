"""Training configuration, losses and reporting metrics."""
