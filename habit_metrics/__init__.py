"""Derived-metrics engine for personal habit tracking."""
