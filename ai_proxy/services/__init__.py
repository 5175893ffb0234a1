"""Services behind the AI proxy.

- core/: quota decisions and request routing
- providers/: upstream API clients (Gemini)
- prompts/: instruction templates
- utils/: usage store and UTC day helpers
"""
