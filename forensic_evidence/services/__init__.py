"""Services for the forensic evidence core."""
