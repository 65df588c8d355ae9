"""Feature slices (routes, schemas, service, store per feature)."""
