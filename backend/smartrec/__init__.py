"""Smart recommendation engine for property listings."""
