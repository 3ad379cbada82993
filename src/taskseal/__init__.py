"""TaskSeal - field-level client-side encryption for task records."""

__version__ = "0.3.0"
