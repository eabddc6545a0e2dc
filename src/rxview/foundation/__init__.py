"""Foundation: configuration and error types shared by every layer."""
