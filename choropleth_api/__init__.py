"""HTTP API for the choropleth binding pipeline."""
