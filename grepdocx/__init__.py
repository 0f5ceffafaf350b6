"""Search the Word documents of a folder tree with Word's own Find."""

__version__ = "0.1.0"
