"""Design-system documents, component discovery and snapshot processing."""
