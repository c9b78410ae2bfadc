"""Adapters connecting the core to files, sockets, HTTP and logging."""
