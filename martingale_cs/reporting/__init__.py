"""Tabular views of confidence-sequence boundaries."""
