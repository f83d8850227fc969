"""Adapters binding the domain to files, HTTP services and the database."""
