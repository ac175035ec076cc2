"""
Adapter layer for the Ebooks API.

Contains the object storage abstraction and its S3 implementation.
"""
