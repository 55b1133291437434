"""Discord cogs loaded by the doorwatch bot."""
