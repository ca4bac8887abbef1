"""Services that load record-store snapshots, call the engines and persist results."""
