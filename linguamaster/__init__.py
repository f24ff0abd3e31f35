"""Interactive text lookup toolkit: tokenization, selection and term lookup."""

from .environment import load_environment

# Dotenv files are applied on first import, before settings are read.
load_environment()

__all__ = ["load_environment"]
