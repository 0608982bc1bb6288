"""Host adapters that supply events and a drawing surface to the core."""
