"""Blog posts with view and like counters."""
