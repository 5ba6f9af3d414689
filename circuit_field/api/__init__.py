"""HTTP interface to a field session."""
