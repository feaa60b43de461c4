"""Adapters binding the core ports to the 4chan API, Pushover and the desktop."""
