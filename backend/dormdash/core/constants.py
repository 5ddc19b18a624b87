"""
Application-wide constants
"""

# Listing conditions accepted on create/update
LISTING_CONDITIONS = ["New", "Like New", "Used"]

# Prefixes required for optional payment handles
CASHAPP_PREFIX = "$"
VENMO_PREFIX = "@"

# Placeholders used by the enrichment joins
UNKNOWN = "Unknown"
NOT_PROVIDED = "Not provided"
