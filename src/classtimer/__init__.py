"""classtimer: countdown-timer logic for a classroom timer."""

__version__ = "0.1.0"
