"""Payload normalization into each template's canonical field layout."""
