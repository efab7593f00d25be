"""Customer profile gate exceptions.

Each carries a stable ``code`` so API clients can send the user to
profile completion.
"""

from __future__ import annotations

from modules.core.exceptions import ProfileError


class ProfileMissing(ProfileError):
    """The acting user has no customer profile."""

    code = "profile_missing"
    default_message = "Create your customer profile before placing orders."


class AddressIncomplete(ProfileError):
    """The profile's shipping address is empty or still a placeholder."""

    code = "address_incomplete"
    default_message = "Update your shipping address before placing orders."
