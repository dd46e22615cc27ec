"""HTTP API for award interpretation and statutory calculations."""
