"""Subscription feature utilities."""
