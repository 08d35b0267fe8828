"""Direct tool execution against the capability catalog, bypassing any agent loop."""
