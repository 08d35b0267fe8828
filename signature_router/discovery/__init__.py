"""Dynamic signature discovery for tool families without hand-written rules."""
