"""Core boottime functionality."""
