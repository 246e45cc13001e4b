"""Client runtime: window loop and component wiring."""
