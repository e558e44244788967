"""
Core functionality for EchoSummary.

This package contains the main logic for:
- Grammatical tagging of transcripts
- Keyword selection, ranking and summary formatting
- Recording session control and capture capabilities
- Speech-to-text for recorded files
- Configuration management
"""
