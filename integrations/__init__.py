"""Integrations with external data: message stores and address books."""
