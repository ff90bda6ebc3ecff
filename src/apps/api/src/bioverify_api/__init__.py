"""HTTP surface for bulk verification."""
