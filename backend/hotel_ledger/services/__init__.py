"""Service layer: ledger components, registries and the reconciliation facade."""
