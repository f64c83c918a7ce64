"""API request tests and their HTTP tooling."""
