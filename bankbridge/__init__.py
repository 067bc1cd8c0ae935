"""Partner integration adapter between the wallet ledger and the banking partner API."""

__version__ = "0.1.0"
