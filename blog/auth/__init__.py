"""Accounts, tokens and role checks."""
