"""HTTP surface: app factory, routes, middleware and metrics."""
