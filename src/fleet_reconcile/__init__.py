"""State reconciliation and identity tracking for Cluster API clusters on Cloud Director."""

__version__ = "0.1.0"
