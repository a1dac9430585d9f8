"""Engine layer -- compiles label requirements into tag policy plans."""
