"""Reconciliation domains."""
