"""Portfolio website with a contact form email relay."""

__version__ = "1.0.0"
