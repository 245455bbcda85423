"""HTTP layer: the versioned REST API and its request decorators."""
