"""Exceptions raised by the indexing services."""


class IndexingError(Exception):
    """A store failure that aborts the whole indexing run."""

    pass


class SearchPublishError(Exception):
    """Publishing a run's documents to the search engine failed."""

    pass
