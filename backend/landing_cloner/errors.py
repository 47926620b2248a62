"""Failure taxonomy for the clone pipeline."""


class AcquisitionError(Exception):
    """The target page could not be captured. Fatal to the pipeline."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to load {url}: {message}")


class NavigationError(AcquisitionError):
    """Navigation timed out or the host could not be reached."""


class AnalysisError(Exception):
    """The vision call failed or its reply did not decode into a VisualAnalysis."""
