"""Search document indexer for the project catalog."""
