"""Core indexing logic — Projection, ledger, synchronization, and watching."""
