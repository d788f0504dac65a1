"""Core configuration and time sources."""
