"""In-memory bank ledger with ATM proximity search."""
