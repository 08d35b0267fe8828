"""Signature Router - tool result to presentation template routing.

Given the name of an invoked tool and/or the JSON payload it returned,
this package decides which pre-built presentation template renders it:
- Signature definitions (family + signature id -> template id)
- Detection by tool name and by payload shape
- Payload normalization into the template's canonical layout
- Direct tool execution against a shared capability catalog
"""

__version__ = "0.1.0"
