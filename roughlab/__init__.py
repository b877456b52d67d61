"""Rough-set attribute subset scoring."""
