"""Remote API clients for executing edits.

Submodules:
    base     -- EditClient protocol, the capability the scheduler depends on
    widar    -- WiDaR edit proxy client (create items, labels, claims)
    wikidata -- Statement reads through the Wikidata wbgetentities API
"""
