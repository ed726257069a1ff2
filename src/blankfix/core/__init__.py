"""Shared configuration, models, errors and output."""
