"""Route groups mounted by tomato.main."""
