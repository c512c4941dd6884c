"""FMW2 administrative report template generator."""
