"""Spreadsheet upload and storage module.

Uploads are written to the configured upload directory under random
names and tracked in an in-memory FileRegistry. Nothing survives a
restart; files are never deleted by the service.
"""
