"""Domain layer: file storage lifecycle, rate limiting and error taxonomy."""
