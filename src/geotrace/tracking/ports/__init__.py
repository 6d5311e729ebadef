"""Ports for the tracking context: repository protocols and their errors."""
