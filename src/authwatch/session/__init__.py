"""Session tracking and the monitor loop."""
