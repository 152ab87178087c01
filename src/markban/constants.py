"""Shared constants for markban boards."""

FRONTMATTER_KEY = "kanban-plugin"

SETTINGS_OPEN = "%% kanban:settings"
SETTINGS_CLOSE = "%%"

LANE_ID_PREFIX = "kanban-lane-id:"
LANE_COLOR_PREFIX = "kanban-lane-background-color:"

COMPLETE_TITLE = "Complete"
ARCHIVE_TITLE = "Archive"

COMPLETE_STRING = f"**{COMPLETE_TITLE}**"
ARCHIVE_STRING = "***"

BASIC_FRONTMATTER = f"---\n\n{FRONTMATTER_KEY}: board\n\n---\n\n"

NEWLINE_INDENT = "    "
