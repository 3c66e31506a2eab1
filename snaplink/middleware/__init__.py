"""HTTP middleware for the snaplink application."""
