"""Core shared logic for indicators, signal analysis, and models.

This package contains pure business logic with no I/O dependencies
(no files, databases, or network access). It is shared by the
application layer (app/) and any other consumer of indicator series.
"""
