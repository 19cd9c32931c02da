"""AI-assisted video storyboard builder."""

__version__ = "0.1.0"
