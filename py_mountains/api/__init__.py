"""HTTP interface for mountain inversion."""
