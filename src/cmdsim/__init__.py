"""Device command simulator - time-driven command lifecycle and polling view."""

__version__ = "0.1.0"
