"""HTTP surface for the Imposter game session."""
