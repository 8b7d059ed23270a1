"""GlycoCare API: meal photo glycemic-impact analysis."""

__version__ = "1.0.0"
