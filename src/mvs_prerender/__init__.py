"""Pre-render step that builds MolViewStories for a Quarto site."""

__version__ = "0.1.0"
