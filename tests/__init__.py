"""
Offsite Payments Test Suite

This package contains all tests for the offsite payments package including:
- Unit tests for field mapping, signatures, status tables and payload decoding
- Provider integration tests
- Callback service and persistence tests
"""
