"""JSON API over the harvest simulation."""
