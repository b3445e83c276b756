"""Three components, one plain class and the configuration class scanning them."""
