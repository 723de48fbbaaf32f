"""Computer Science Department FAQ assistant."""
