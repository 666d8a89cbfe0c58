"""Business logic layer for files app.

This package contains all business logic for file operations:
- Storage quota admission and accounting
- File upload, download, rename, delete and listing
- Folder creation, rename and deletion

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
