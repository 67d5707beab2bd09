"""
app/storage package marker.
"""

from app.storage.upload_staging import StagedUpload, UploadStagingArea, UploadStagingError

__all__ = [
    "StagedUpload",
    "UploadStagingArea",
    "UploadStagingError",
]
