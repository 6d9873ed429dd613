"""Exception types that are allowed to terminate a run."""


class MediaSyncError(Exception):
    """Base class for fatal mediasync errors."""


class InputError(MediaSyncError):
    """Invalid command-line input or a missing input path.

    Raised before the catalog is opened.
    """


class TransportConfigError(InputError):
    """Immich connection settings are missing."""


class CatalogStoreError(MediaSyncError):
    """The catalog database could not be opened, read or written."""
