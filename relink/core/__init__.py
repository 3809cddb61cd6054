"""Configuration, logging, exceptions and CLI helpers shared by relink."""
