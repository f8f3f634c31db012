"""Category taxonomy referenced by posts."""
