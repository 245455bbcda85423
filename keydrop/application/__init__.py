"""Application services orchestrating the domain for the API and tasks."""
