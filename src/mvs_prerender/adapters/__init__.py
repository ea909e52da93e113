"""Process-level adapters for the pre-render CLI."""
