"""Core domain: syslog records, their codecs, ports and errors."""
