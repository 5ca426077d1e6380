"""BookIt experience booking backend."""
