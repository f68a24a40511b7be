"""Wire-level schemas for the NSClient++ REST API."""
