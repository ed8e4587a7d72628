"""Commit-keyed permalink resolution."""
