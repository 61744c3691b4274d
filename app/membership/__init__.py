"""Membership lifecycle and attendance reconciliation rules."""
