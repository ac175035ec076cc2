"""
Ebooks API.

Signed-URL upload and viewing of e-books (PDF/EPUB) backed by S3-compatible
object storage and a SQLite metadata store.
"""
