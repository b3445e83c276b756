"""Package containing a module that cannot be imported."""
