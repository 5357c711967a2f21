"""Data models and error types shared by every layer."""
