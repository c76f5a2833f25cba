"""HTTP and websocket surface for the simulation."""
