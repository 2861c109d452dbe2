"""Delete every object in an S3-compatible bucket with batched, concurrent requests."""

__version__ = "0.1.0"
