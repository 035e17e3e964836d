"""Core configuration, HTTP, logging and errors."""
