"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Storage backends for file bytes (local filesystem, S3)
- Metadata helpers (MIME type, extensions, storage names)

Keep infrastructure concerns separate from business logic.
"""
