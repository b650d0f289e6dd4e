"""Page resolution pipeline."""
