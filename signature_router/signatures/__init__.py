"""Signature definitions — the canonical catalog of presentation templates.

A signature is a (family, signature_id) pair that names which pre-built
template renders a tool result, which actions that template supports, and
whether its action coverage is complete.
"""
