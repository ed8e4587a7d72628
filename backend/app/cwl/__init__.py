"""Descriptors of the CWL elements held by workflow records."""
