"""Hospital management admin backend."""
