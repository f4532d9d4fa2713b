"""Student Records: REST API and client logic for managing student records."""

__version__ = "1.0.0"
