"""Auth log line parsing: classification and timestamp resolution."""
