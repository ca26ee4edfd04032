"""HTTP surface for the reference backend."""
