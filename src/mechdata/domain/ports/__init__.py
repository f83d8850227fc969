"""Ports (protocols) the domain depends on."""
