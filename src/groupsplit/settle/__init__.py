"""Balance calculation and settlement suggestions."""
