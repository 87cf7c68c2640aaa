"""Configuration and error types shared by the hashing boundary."""
