"""Domain layer -- label requirements, enforcement modes and policy values."""
