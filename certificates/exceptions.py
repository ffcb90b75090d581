class ArtifactUploadError(Exception):
    """The external image host rejected or failed to store a certificate artifact."""


class StorageNotConfigured(ArtifactUploadError):
    """No external storage credentials are configured."""
