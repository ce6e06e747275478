"""examdesk: test authoring and auto-graded test taking."""

__version__ = "0.1.0"
