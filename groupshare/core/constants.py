"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Group Code Configuration
# Join codes are 6-digit numeric strings (100000-999999)
GROUP_CODE_LENGTH = 6
GROUP_CODE_MIN = 10 ** (GROUP_CODE_LENGTH - 1)
GROUP_CODE_MAX = 10 ** GROUP_CODE_LENGTH - 1

# Field length limits (mirror the column sizes in db/models)
MAX_DEVICE_ID_LENGTH = 255
MAX_USER_NAME_LENGTH = 100
MAX_PLACE_ID_LENGTH = 255
MAX_PLACE_NAME_LENGTH = 255
MAX_MEETUP_NOTE_LENGTH = 200

# Check-out modes reported by the checkout endpoint
CHECKOUT_MODE_TARGETED = "targeted"
CHECKOUT_MODE_FULL = "full"

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
