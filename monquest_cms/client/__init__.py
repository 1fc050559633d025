"""Admin panel client runtime: session cache, sync loop, gates and counters."""
