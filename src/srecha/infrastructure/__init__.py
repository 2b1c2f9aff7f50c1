"""Infrastructure layer: storage adapters behind the core interfaces."""
