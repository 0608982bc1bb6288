"""Process-wide runtime services (logging, profiling)."""
