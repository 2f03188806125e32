"""Configuration package: file locations, TOML-backed settings and defaults."""
