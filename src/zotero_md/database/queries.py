# SPDX-License-Identifier: MIT
"""SQL used to read the Zotero schema."""

from ..constants import (
    CREATOR_TYPE_PRIORITY,
    EXCLUDED_ITEM_TYPES,
    PUBLICATION_FIELDS,
    UNRANKED_CREATOR_PRIORITY,
)


def _field_value(field_name: str) -> str:
    return (
        f"MAX(CASE WHEN fields.fieldName = '{field_name}' "
        "THEN itemDataValues.value END)"
    )


def _creator_priority_case() -> str:
    whens = "\n".join(
        f"        WHEN '{creator_type}' THEN {rank}"
        for rank, creator_type in enumerate(CREATOR_TYPE_PRIORITY, start=1)
    )
    return (
        "CASE creatorTypes.creatorType\n"
        f"{whens}\n"
        f"        ELSE {UNRANKED_CREATOR_PRIORITY}\n"
        "      END"
    )


# One row per (item, creator), highest priority role first
AUTHORS_QUERY = f"""
    SELECT items.itemID, creators.lastName, creators.firstName,
      creatorTypes.creatorType,
      {_creator_priority_case()} AS priority
    FROM items
    JOIN itemCreators ON items.itemID = itemCreators.itemID
    JOIN creators ON itemCreators.creatorID = creators.creatorID
    JOIN creatorTypes ON itemCreators.creatorTypeID = creatorTypes.creatorTypeID
    WHERE items.itemID NOT IN (SELECT itemID FROM deletedItems)
    ORDER BY items.itemID, priority, itemCreators.orderIndex
"""

_PUBLICATION_COALESCE = ",\n        ".join(
    _field_value(name) for name in PUBLICATION_FIELDS
)
_EXCLUDED_TYPES = ", ".join(f"'{name}'" for name in EXCLUDED_ITEM_TYPES)

# One row per regular item, newest first; the batch limit is bound as a parameter
ITEMS_QUERY = f"""
    SELECT
      items.itemID,
      items.key,
      itemTypes.typeName,
      items.dateModified,
      {_field_value("title")} AS title,
      {_field_value("date")} AS date,
      COALESCE(
        {_PUBLICATION_COALESCE}
      ) AS publication,
      {_field_value("url")} AS url,
      {_field_value("extra")} AS extra,
      {_field_value("abstractNote")} AS abstract
    FROM items
    LEFT JOIN itemTypes ON items.itemTypeID = itemTypes.itemTypeID
    LEFT JOIN itemData ON items.itemID = itemData.itemID
    LEFT JOIN fields ON itemData.fieldID = fields.fieldID
    LEFT JOIN itemDataValues ON itemData.valueID = itemDataValues.valueID
    WHERE items.itemID NOT IN (SELECT itemID FROM deletedItems)
      AND itemTypes.typeName NOT IN ({_EXCLUDED_TYPES})
    GROUP BY items.itemID
    ORDER BY items.dateModified DESC
    LIMIT ?
"""

COUNT_ITEMS_QUERY = """
    SELECT COUNT(*) FROM items
    WHERE itemID NOT IN (SELECT itemID FROM deletedItems)
"""

RAW_FIELDS_BY_KEY_QUERY = """
    SELECT fields.fieldName, itemDataValues.value
    FROM items
    JOIN itemData ON items.itemID = itemData.itemID
    JOIN fields ON itemData.fieldID = fields.fieldID
    JOIN itemDataValues ON itemData.valueID = itemDataValues.valueID
    WHERE items.key = ?
    ORDER BY fields.fieldName
"""

ITEM_SUMMARY_BY_KEY_QUERY = f"""
    SELECT
      items.key,
      {_field_value("title")} AS title,
      {_field_value("date")} AS date,
      COALESCE(
        {_PUBLICATION_COALESCE}
      ) AS publication
    FROM items
    LEFT JOIN itemData ON items.itemID = itemData.itemID
    LEFT JOIN fields ON itemData.fieldID = fields.fieldID
    LEFT JOIN itemDataValues ON itemData.valueID = itemDataValues.valueID
    WHERE items.key = ?
    GROUP BY items.itemID
"""
