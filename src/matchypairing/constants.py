# Matchy Pairing
# Copyright (C) 2025  Matchy Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

# --- Engine limits ---
MIN_PARTICIPANTS = 2
# raise only after checking solver performance at the new size
MAX_PARTICIPANTS = 200

# --- Replay protection ---
KEY_SEPARATOR = "_"
CHECKSUM_LENGTH = 8

# --- Discord defaults ---
API_BASE_URL = "https://discord.com/api/v10"
MESSAGE_LINK_STUB = "https://discord.com/channels/"
ROLE_NAME = "matchy-meetups"
HISTORY_CHANNEL_NAME = "matchy-meetups-history"
NOTIFICATION_CHANNEL_NAME = "matchy-meetups"
REQUEST_TIMEOUT = 10.0

# member listing: page size and a cap on pages in case end-of-page detection breaks
MEMBER_PAGE_LIMIT = 1000
MEMBER_MAX_PAGES = 20

# history scan
MESSAGE_PAGE_LIMIT = 100
MAX_HISTORY_MESSAGES = 1000
HISTORY_MAX_AGE_DAYS = 365

# --- Logging ---
LOG_FILE_NAME = "matchy-pairing.log"
LOG_FOLDER_NAME = "Matchy Pairing"
DEFAULT_LOG_LEVEL = "INFO"

# --- Message text ---
ALL_NOVEL_MESSAGE = "All members were matched with new people"
IMPERFECT_MESSAGE = (
    "The following members could only be matched with people they may have "
    "matched with before: {members}"
)
DM_TEMPLATE = (
    "Hey, thanks for joining Matchy Meetups. Your pairing for this round is here! "
    "Please take this opportunity to reach out to them and schedule some time to "
    "hang out in the next two weeks. I hope you enjoy!\n\n\n"
    "**Your pairing is with:** {partners}\n\n"
    "_(responses here will not be seen; please message an organizer directly if "
    "you have any questions)_"
)
