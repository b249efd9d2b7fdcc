"""Domain layer for dayledger application.

Services are imported from their modules directly; this package does not
re-export them so that the database layer can import entities without
pulling in services that depend on it.
"""
