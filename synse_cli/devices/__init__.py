"""
Device inventory, filtering, and the query pipeline.

    inventory.py  - InventoryRecord and the scan-backed inventory source
    filters.py    - predicates over inventory records
    pipeline.py   - filter → fetch detail → aggregate, with bounded fan-out
    power.py      - power device reads and state changes
    schemas.py    - Synse Server payload models
"""
