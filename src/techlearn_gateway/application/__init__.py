"""Application layer: orchestration of the auth building blocks."""
