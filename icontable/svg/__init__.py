"""SVG document and path-data parsing."""
