"""Planet imagery gateway.

Azure Functions HTTP adapter over the Planet Data API: searches the
scene archive with a simplified polygon/date/cloud-cover filter, lists
the assets of an item, and triggers asset activation with a single
follow-up status check.
"""

__version__ = "0.1.0"
