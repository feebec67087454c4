"""hexcrawl sandbox server

A small HTTP front end over the geometry engine for trying out brushes,
flood fills, visibility and pattern transforms from a browser or script.

Usage:
    python -m hexcrawl.server.run

Then open http://localhost:8000/docs in your browser.
"""

__version__ = "0.1.0"
