"""Column Profiler — Core package (exceptions shared by all services)."""
