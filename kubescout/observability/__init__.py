"""Logging and metrics for kubescout."""
