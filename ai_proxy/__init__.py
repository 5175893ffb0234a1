"""MyMacro AI proxy service."""
