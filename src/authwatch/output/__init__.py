"""Activity log rendering and monthly file output."""
