"""FreelancMusic: directory API for freelance musicians."""
