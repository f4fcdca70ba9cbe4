"""Infrastructure helpers that sit below the service layer."""
