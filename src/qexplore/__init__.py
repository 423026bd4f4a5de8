"""q-explore: random location picking with density-anomaly analysis."""

__version__ = "0.1.0"
