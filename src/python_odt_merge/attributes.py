"""
Attribute extraction from the raw text of a single tag.

Only conservative `key="value"` pairs are recognized. Keys are printable
ASCII without whitespace, quotes, angle brackets or equals signs; values are
printable ASCII (spaces included) without quotes or angle brackets. Anything
outside those ranges is not an attribute and is skipped without error.
"""

import re

# key: ! # $ % & ' ( ) * + , - . / 0-9 : ; ? @ A-Z [ \ ] ^ _ ` a-z { | } ~
# value: the key characters plus space and "="
ATTRIBUTE_NAME = r"[!#-;?-~]+"
ATTRIBUTE_VALUE = r"[ !#-;=?-~]*"
ATTRIBUTE_PATTERN = re.compile(rf'({ATTRIBUTE_NAME})="({ATTRIBUTE_VALUE})"')


def parse_attributes(tag_text: str) -> dict[str, str]:
    """Extract the attributes of one tag occurrence.

    Values are returned exactly as written: entities are not decoded.
    A repeated key keeps the last value.

    Args:
        tag_text: Raw text of the tag, e.g. '<text:p text:style-name="P1">'

    Returns:
        Mapping of attribute name to raw attribute value, in source order

    Example:
        >>> parse_attributes('<text:variable-set text:name="total" office:value-type="string">')
        {'text:name': 'total', 'office:value-type': 'string'}
    """
    attributes: dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(tag_text):
        attributes[match.group(1)] = match.group(2)
    return attributes
