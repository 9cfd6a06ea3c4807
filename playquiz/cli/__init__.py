"""Terminal host for playquiz sessions."""
