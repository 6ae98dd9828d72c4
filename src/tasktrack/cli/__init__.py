"""Console front-end: composition root, view router and slash commands."""
