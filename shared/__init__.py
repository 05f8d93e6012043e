"""Domain logic shared by the proxy routes: identifiers, aggregation, errors."""
