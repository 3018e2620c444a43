"""icontable: compile SVG icon sets into static, flattened geometry tables."""

__version__ = "0.1.0"
