"""Infrastructure adapters: local filesystem storage and Redis-backed rate limits."""
