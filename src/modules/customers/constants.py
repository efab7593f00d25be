"""Customer profile constants.

A profile created on first access carries placeholder values; an address
containing ``PLACEHOLDER_MARKER`` is never deliverable.
"""

PLACEHOLDER_ADDRESS = "Please update your address"
PLACEHOLDER_MARKER = "Please update"
PLACEHOLDER_FULL_NAME = "New Customer"
PLACEHOLDER_PHONE = "000-000-0000"
