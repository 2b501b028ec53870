"""Filter engine, pixel graph and rendering backend."""
