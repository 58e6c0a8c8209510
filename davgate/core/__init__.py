"""Gateway core — command resolution, allow-list matching, error encoding
and request dispatch."""
