"""Core abstraction layer: detection, execution, reconciliation and the operation contract."""
