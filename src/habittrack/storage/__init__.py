"""Durable key-value partitions, the persistence gateway and app settings."""
