"""Command line interface for dayledger."""
