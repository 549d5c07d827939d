"""
Eureka: input and store your ideas without leaving the terminal.

Each idea is written to README.md in a git repository of your choice,
committed with a one-line summary and pushed to origin.
"""

__version__ = "0.1.0"
