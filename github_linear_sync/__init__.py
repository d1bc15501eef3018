"""Synchronize GitHub issues into Linear."""
