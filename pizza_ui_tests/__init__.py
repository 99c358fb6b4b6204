"""Playwright UI tests for the JWT Pizza frontend, with a mocked backend."""
