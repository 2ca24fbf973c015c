"""Core library for promptsmith: configuration, schemas, and the composition engine."""
