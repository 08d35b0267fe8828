"""Capability catalog access — the shared, externally owned list of tools.

The catalog is read-only from this package's point of view. A host process
supplies it through a CapabilityCatalogReader; StaticCatalogReader is the
in-memory implementation used by the API and tests.
"""
