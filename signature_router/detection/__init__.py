"""Signature detection — pick a template by tool name, by payload shape, or both.

The entry points live in detection.engine: by_tool_name, by_data_shape and
infer. Hand-written tool-name rules are in detection.rules.
"""
