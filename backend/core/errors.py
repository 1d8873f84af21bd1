class StoreError(RuntimeError):
    """I/O failure reported by one of the external stores."""


class DocumentStoreError(StoreError):
    pass


class ImageUploadError(StoreError):
    pass
