"""Configuration module for TTL-Cache."""
