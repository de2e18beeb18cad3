"""Protocol versions, method and control codes, typed headers and sync/async byte parsers."""

__version__ = "0.1.0"

__all__ = ["codes", "errors", "header", "parser", "version"]