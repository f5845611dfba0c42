"""Exception handlers that answer every failure with an error envelope."""
