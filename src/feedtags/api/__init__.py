"""HTTP surface for the feedtags tag engine."""
