"""Configuration management."""
from .settings import *
