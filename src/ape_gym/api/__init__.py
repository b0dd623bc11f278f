"""REST API layer: routes, dependencies, middleware and error handling."""
