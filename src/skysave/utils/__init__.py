"""Low-level helpers shared by the format codecs."""
