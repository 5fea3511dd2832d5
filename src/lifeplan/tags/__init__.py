"""Tag vocabulary store."""
