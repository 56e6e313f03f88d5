"""
SQL Server catalog statements used for schema inspection.

Per-table statements take the table name as their only ``?`` parameter.
Result column names form the contract consumed by ``SchemaInspector``.
"""

# Base tables with their MS_Description extended property. No ORDER BY:
# the catalog's enumeration order is kept as-is.
TABLES_QUERY = """
SELECT
    t.TABLE_NAME,
    CAST(p.value AS NVARCHAR(MAX)) AS TABLE_DESCRIPTION
FROM
    INFORMATION_SCHEMA.TABLES t
    LEFT JOIN sys.extended_properties p ON
        p.major_id = OBJECT_ID(t.TABLE_NAME)
        AND p.minor_id = 0
        AND p.name = 'MS_Description'
WHERE
    t.TABLE_TYPE = 'BASE TABLE'
"""

COLUMNS_QUERY = """
SELECT
    c.COLUMN_NAME,
    c.DATA_TYPE,
    c.IS_NULLABLE,
    c.COLUMN_DEFAULT,
    CAST(ep.value AS NVARCHAR(MAX)) AS COLUMN_DESCRIPTION
FROM
    INFORMATION_SCHEMA.COLUMNS c
    LEFT JOIN sys.columns sc ON
        sc.object_id = OBJECT_ID(c.TABLE_NAME)
        AND sc.name = c.COLUMN_NAME
    LEFT JOIN sys.extended_properties ep ON
        ep.major_id = sc.object_id
        AND ep.minor_id = sc.column_id
        AND ep.name = 'MS_Description'
WHERE
    c.TABLE_NAME = ?
ORDER BY
    c.ORDINAL_POSITION
"""

PRIMARY_KEYS_QUERY = """
SELECT
    COLUMN_NAME
FROM
    INFORMATION_SCHEMA.KEY_COLUMN_USAGE
WHERE
    OBJECTPROPERTY(OBJECT_ID(CONSTRAINT_NAME), 'IsPrimaryKey') = 1
    AND TABLE_NAME = ?
ORDER BY
    ORDINAL_POSITION
"""

FOREIGN_KEYS_QUERY = """
SELECT
    fk.name AS FK_NAME,
    OBJECT_NAME(fk.parent_object_id) AS TABLE_NAME,
    c1.name AS COLUMN_NAME,
    OBJECT_NAME(fk.referenced_object_id) AS REFERENCED_TABLE_NAME,
    c2.name AS REFERENCED_COLUMN_NAME
FROM
    sys.foreign_keys fk
    INNER JOIN sys.foreign_key_columns fkc ON fk.object_id = fkc.constraint_object_id
    INNER JOIN sys.columns c1 ON
        fkc.parent_object_id = c1.object_id
        AND fkc.parent_column_id = c1.column_id
    INNER JOIN sys.columns c2 ON
        fkc.referenced_object_id = c2.object_id
        AND fkc.referenced_column_id = c2.column_id
WHERE
    OBJECT_NAME(fk.parent_object_id) = ?
ORDER BY
    fk.name, fkc.constraint_column_id
"""

# Key columns only; INCLUDE columns carry key_ordinal 0 and are skipped.
INDEXES_QUERY = """
SELECT
    i.name AS INDEX_NAME,
    COL_NAME(ic.object_id, ic.column_id) AS COLUMN_NAME,
    i.is_unique
FROM
    sys.indexes i
    INNER JOIN sys.index_columns ic ON
        i.object_id = ic.object_id
        AND i.index_id = ic.index_id
WHERE
    i.object_id = OBJECT_ID(?)
    AND i.is_primary_key = 0
    AND ic.is_included_column = 0
ORDER BY
    i.name, ic.key_ordinal
"""
