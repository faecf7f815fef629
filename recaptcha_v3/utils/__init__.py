"""Utility helpers shared by the verifier."""
