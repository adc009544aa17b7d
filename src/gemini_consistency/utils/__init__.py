"""Media preparation and display helpers."""
