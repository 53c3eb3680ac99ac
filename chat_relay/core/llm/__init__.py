"""LLM integration layer.

This package is intentionally small:
- No prompt/reply logging.
- Configurable via environment variables.
- Treated as a pure/stateless function by callers.
"""
