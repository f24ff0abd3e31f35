"""Speech synthesis for looked-up terms."""
