"""Qt glue for driving the render worker from a GUI event loop."""
