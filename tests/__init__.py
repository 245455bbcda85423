"""
Tests package for the Keydrop service.

- unit/: Domain, application, API and task tests with mocked collaborators
- integration/: Tests against the real filesystem and a live Redis
"""
