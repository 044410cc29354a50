"""docchat command-line interface."""
