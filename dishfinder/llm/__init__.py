"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Expose a small async text-generation client used by every pipeline stage.
- Surface missing credentials as a configuration error instead of a silent no-op.
"""
