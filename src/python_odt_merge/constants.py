"""
Centralized constants for OpenDocument parts, element names and attributes.

Import from here instead of repeating literal part names or element names
across modules.
"""

# =============================================================================
# Package Parts
# =============================================================================

# Main text content stream of an OpenDocument container
CONTENT_PART = "content.xml"

# Uncompressed first entry of every OpenDocument zip
MIMETYPE_PART = "mimetype"

# Media type of OpenDocument Text documents
ODT_MIMETYPE = "application/vnd.oasis.opendocument.text"

# Prefix for temporary extraction directories
TEMP_DIR_PREFIX = "python_odt_merge_"


# =============================================================================
# Element and Attribute Names
# =============================================================================

TEXT_PARAGRAPH = "text:p"
TEXT_VARIABLE_SET = "text:variable-set"
TEXT_VARIABLE_GET = "text:variable-get"
TABLE_TABLE = "table:table"
TABLE_ROW = "table:table-row"

ATTR_TEXT_NAME = "text:name"
ATTR_TABLE_NAME = "table:name"
ATTR_STYLE_NAME = "table:style-name"
ATTR_VALUE_TYPE = "office:value-type"
ATTR_STRING_VALUE = "office:string-value"
