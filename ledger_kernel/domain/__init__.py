"""Pure domain primitives for the ledger kernel."""
