"""User interfaces built on top of the traitsmith core."""
