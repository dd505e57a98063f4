"""Credit card catalog engine: records, loading and pure query operations."""
