"""Game constants for the Bingo room server."""

import string

# Room limits
MIN_PLAYERS = 2
MAX_PLAYERS = 5
DEFAULT_MAX_PLAYERS = 5

# Room codes
ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
