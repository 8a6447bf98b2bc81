"""HTTP surface for minifygym."""
