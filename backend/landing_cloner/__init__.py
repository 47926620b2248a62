"""Website cloning pipeline: URL in, renderable landing page config out."""
