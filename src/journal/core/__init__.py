"""Cross-cutting infrastructure: database, errors, auth, logging, permissions."""
