"""Rule files - loading and validating pricing rule CSVs."""
