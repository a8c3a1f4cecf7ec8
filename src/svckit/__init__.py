"""Shared service utilities: error codes, HTTP responses, logging and graceful shutdown."""
