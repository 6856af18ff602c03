"""Core exceptions and settings."""
