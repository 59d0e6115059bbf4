class MeetingLogError(Exception):
    """Base error for the meeting log archive."""


class MetadataError(MeetingLogError):
    """A filename matched a dated convention but the date does not exist."""


class IndexLoadError(MeetingLogError):
    """The search index could not be fetched or did not have the expected shape."""
