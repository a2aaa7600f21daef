"""
Upload gateway: relays a single uploaded file to S3-compatible storage.
"""

__version__ = "0.1.0"
