"""Constants for the DFXML writer."""

# --- Document ---
XML_HEADER = "<?xml version='1.0' encoding='UTF-8'?>\n"
INDENT = "  "

# Named entities for markup characters. "&" is handled by saxutils.escape itself.
XML_ENTITIES = {
    "'": "&apos;",
    '"': "&quot;",
}

# Control characters are kept visible as fixed percent-codes
PERCENT_ENCODINGS = {
    "\0": "%00",
    "\r": "%0D",
    "\n": "%0A",
    "\t": "%09",
}

# Characters never allowed in a sanitized tag name
TAG_NAME_RESERVED = "<>\r\n&'\""

# --- DTD ---
DEFAULT_DTD_ROOT = "fiwalk"
DTD_ATTLISTS = [
    "<!ATTLIST volume startsector CDATA #IMPLIED>",
    "<!ATTLIST run start CDATA #IMPLIED>",
    "<!ATTLIST run len CDATA #IMPLIED>",
]

# Trailing X characters are replaced by a unique suffix
STAGING_SUFFIX = "_tmp_XXXXXXXX"

# --- Timestamps ---
USEC_PER_SEC = 1_000_000
START_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# --- Configuration ---
CONFIG_FILENAME = ".dfxml_config.json"
ENV_TEMPFILE_TEMPLATE = "DFXML_TEMPFILE_TEMPLATE"
ENV_DTD_ROOT = "DFXML_DTD_ROOT"
