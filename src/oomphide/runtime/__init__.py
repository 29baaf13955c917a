"""Code that runs inside the installed IDE's own context."""
