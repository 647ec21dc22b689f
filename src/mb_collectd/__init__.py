"""Command-line client and library for collectd's unixsock plugin."""
