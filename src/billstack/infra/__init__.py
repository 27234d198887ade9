"""Infrastructure layer: database engine and repositories."""
