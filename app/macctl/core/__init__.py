"""Reconciliation core: value semantics, diffing, records and apply."""
