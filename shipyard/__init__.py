"""Shipyard: deploy uploaded or linked projects to GitHub and Vercel."""

__version__ = "0.1.0"
