"""EchoSummary - turn dictated notes into a short list of key terms."""

__version__ = "0.1.0"
