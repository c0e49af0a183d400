"""Values shared by the endpoint, the exporters and the client.

The column order is the on-disk layout of every sheet; exports and the
workbook writer read rows back in this order.
"""

SHEET_COLUMNS = (
    "row_id",
    "session_id",
    "timestamp",
    "received_at",
    "survey_version",
    "point_count",
    "geometry_json",
    "coordinates",
    "user_agent",
)

# Sheets created by the app keep the header row frozen
FROZEN_HEADER_ROWS = 1

UNKNOWN = "unknown"

# 12 random bytes -> 24 hex chars
SESSION_ID_BYTES = 12

BACKUP_SHEET_PREFIX = "Backup_"
EXPORT_FILE_PREFIX = "line_survey_export_"
STAMP_FORMAT = "%Y%m%d_%H%M%S"

MISSING_FIELDS_ERROR = "Missing required fields: sessionId and geometry"
SAVED_MESSAGE = "Data saved successfully"
PING_MESSAGE = "Line survey endpoint is running"
SEND_ERROR_MESSAGE = "Error sending your response. Please try again."

# URL under which exported files are served
EXPORTS_URL = "/data/exports"
