"""Durable key/value slots used to persist stores."""
