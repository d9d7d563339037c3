"""HR Portal — role-aware page service over the HRMS REST API."""
