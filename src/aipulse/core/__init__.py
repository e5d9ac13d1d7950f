"""Core infrastructure: database, logging and exceptions."""
