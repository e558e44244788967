"""
Test suite for EchoSummary.

This package contains tests for all core functionality including:
- Type definitions and data structures
- Keyword filtering, ranking and summary formatting
- Tagger adapters
- Recording session control and capture capabilities
- Configuration management
- The command-line interface
"""
