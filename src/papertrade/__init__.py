"""Paper-trading simulator: trade execution and FIFO position ledger."""

__version__ = "0.1.0"
