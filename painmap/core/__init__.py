"""Statistics, validation, fallback text, and the caller-facing summary service."""
