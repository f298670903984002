"""AutoList -- batch statement edits on lists of Wikidata items.

Core modules:
    models          -- Command, statuses, tagged results and run reports
    parser          -- Statement rows + selected items -> ordered Command list.
                       Malformed rows are skipped and reported, not raised.
    scheduler       -- Run loop: concurrency cap, one running command per item,
                       throttle after completions, cooperative cancellation
    executor        -- Maps one Command onto EditClient calls, returns a
                       CommandResult (remote errors never escape)
    rewriter        -- Placeholder -> new item id propagation after creations
    concurrency     -- StopFlag used for cooperative cancellation
    quickstatements -- QuickStatements v1 export of a Command list
    config          -- Configuration via pydantic-settings (AUTOLIST_* env vars)
    cli             -- Click CLI (run, export)
    sanitize        -- Item/property id normalization and label helpers

Subpackages:
    api -- EditClient protocol, WiDaR proxy client, Wikidata statement reads
"""
