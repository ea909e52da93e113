"""Command-line entry points for mvs_prerender."""
